# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import typing
from datetime import datetime
from enum import Enum

import cdflib  # type: ignore[reportMissingTypeStubs]
import numpy as np

import cdf_attrs as ca
from cdf_attrs.errors import CharacterDecodeError

if typing.TYPE_CHECKING:
    from numpy.typing import NDArray


class TypeTag(Enum):
    """Enum of the CDF primitive data types an attribute entry can hold.

    The values are the integer type codes used inside CDF files.
    """

    INT1 = 1
    INT2 = 2
    INT4 = 4
    INT8 = 8
    UINT1 = 11
    UINT2 = 12
    UINT4 = 14
    REAL4 = 21
    REAL8 = 22
    EPOCH = 31
    EPOCH16 = 32
    TIME_TT2000 = 33
    BYTE = 41
    FLOAT = 44
    DOUBLE = 45
    CHAR = 51
    UCHAR = 52

    @classmethod
    def _missing_(cls, value: object) -> TypeTag:
        if isinstance(value, str):
            key = value.strip().upper()
            key = key.removeprefix("CDF_")
            if key in cls.__members__:
                return cls.__members__[key]

        msg = "{!r} is not a valid {}.  Valid types: {}".format(
            value,
            cls.__name__,
            ", ".join([f"CDF_{m.name}" for m in cls]),
        )
        raise ValueError(msg)

    @property
    def cdf_name(self) -> str:
        """Returns the name of the type as written in CDF documentation, e.g. 'CDF_DOUBLE'."""
        return f"CDF_{self.name}"

    @property
    def is_character(self) -> bool:
        return self in (TypeTag.CHAR, TypeTag.UCHAR)

    @property
    def is_epoch(self) -> bool:
        return self in (TypeTag.EPOCH, TypeTag.EPOCH16, TypeTag.TIME_TT2000)


def decode_characters(value: typing.Any, *, attribute: str|None = None, entry: int|str|None = None) -> typing.Any:  # noqa: ANN401
    """Converts character entry data into text.

    CDF character entries may come back from the file layer as `str`, `bytes` or
    numpy arrays of either. Bytes are decoded strictly with the package wide
    character encoding (see `cdf_attrs.set_char_encoding`) and trailing NUL padding
    is stripped. Arrays with more than one element are returned as a list of strings.

    Parameters:
        value (Any): The raw character data.
        attribute (str | None, optional): Attribute the data belongs to, used in error messages.
        entry (int | str | None, optional): Entry number (or variable name) of the data,
            used in error messages.

    Returns:
        Any: A `str`, or a list of `str` for multi-element arrays.

    Raises:
        CharacterDecodeError: If bytes are not valid in the character encoding.
    """
    if isinstance(value, str):
        return value.rstrip("\x00")

    if isinstance(value, bytes | bytearray):
        encoding = ca.get_char_encoding()
        try:
            return bytes(value).decode(encoding).rstrip("\x00")
        except UnicodeDecodeError as e:
            raise CharacterDecodeError(encoding, attribute, entry) from e

    if isinstance(value, np.ndarray):
        text = [decode_characters(item.item() if isinstance(item, np.generic) else item,
                                  attribute=attribute, entry=entry) for item in value.ravel()]
        return text[0] if len(text) == 1 else text

    if isinstance(value, np.generic):
        return decode_characters(value.item(), attribute=attribute, entry=entry)

    if isinstance(value, list | tuple):
        return [decode_characters(item, attribute=attribute, entry=entry) for item in value]

    msg = f"Cannot decode value of type {type(value).__name__} as characters!"
    raise TypeError(msg)


def epoch_to_datetime(value: typing.Any, datatype: TypeTag) -> list[datetime]:  # noqa: ANN401
    """Converts epoch entry data to timezone-naive UTC datetimes.

    Parameters:
        value (Any): A single epoch value or an array of epoch values.
        datatype (TypeTag): One of `TypeTag.EPOCH`, `TypeTag.EPOCH16` or `TypeTag.TIME_TT2000`.

    Returns:
        list[datetime]: The converted times.

    Raises:
        TypeError: If `datatype` is not an epoch type.
    """
    if not datatype.is_epoch:
        msg = f"Datatype {datatype.cdf_name} is not an epoch type!"
        raise TypeError(msg)

    epochs: NDArray[np.generic]
    if datatype is TypeTag.EPOCH16:
        epochs = np.asarray(value, dtype=np.complex128)
    elif datatype is TypeTag.TIME_TT2000:
        epochs = np.asarray(value, dtype=np.int64)
    else:
        epochs = np.asarray(value, dtype=np.float64)

    datetimes = cdflib.cdfepoch.to_datetime(np.atleast_1d(epochs))  # type: ignore[reportUnknownMemberType]

    return [np.datetime64(dt, "us").astype(datetime) for dt in np.atleast_1d(datetimes)]


class Scope(Enum):
    """Enum for the declared scope of an attribute.

    The values are the integer scope codes used inside CDF files. The "assumed"
    variants are used by files that do not declare the scope explicitly.
    """

    GlobalScope = 1
    VariableScope = 2
    GlobalScopeAssumed = 3
    VariableScopeAssumed = 4

    @classmethod
    def _missing_(cls, value: object) -> Scope:
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_").replace(" ", "_")
            names = {
                "GLOBAL_SCOPE": cls.GlobalScope,
                "GLOBAL": cls.GlobalScope,
                "VARIABLE_SCOPE": cls.VariableScope,
                "VARIABLE": cls.VariableScope,
                "GLOBAL_SCOPE_ASSUMED": cls.GlobalScopeAssumed,
                "VARIABLE_SCOPE_ASSUMED": cls.VariableScopeAssumed,
            }
            if key in names:
                return names[key]

        msg = f"{value!r} is not a valid {cls.__name__}."
        raise ValueError(msg)

    @property
    def is_global(self) -> bool:
        return self in (Scope.GlobalScope, Scope.GlobalScopeAssumed)

    @property
    def is_assumed(self) -> bool:
        return self in (Scope.GlobalScopeAssumed, Scope.VariableScopeAssumed)
