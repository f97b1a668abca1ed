# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass
from typing import Any

import numpy as np

from cdf_attrs.datatypes import TypeTag, decode_characters, epoch_to_datetime
from cdf_attrs.entry_mask import EntryMask
from cdf_attrs.errors import (
    Diagnostic,
    EntryNotFoundError,
    InvalidArgumentError,
    UnsupportedScopeError,
    report_partial_entries,
)

if typing.TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from cdf_attrs.attribute import Attribute
    from cdf_attrs.probe import EntryProbe

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Absent:
    """The attribute holds no entries."""

    def unwrap(self) -> None:
        return None


@dataclass(frozen=True, slots=True, eq=False)
class Scalar:
    """A single entry value with its type."""

    value: Any
    datatype: TypeTag

    def unwrap(self) -> Any:  # noqa: ANN401
        return self.value

    def to_datetime(self) -> list[datetime]:
        return epoch_to_datetime(self.value, self.datatype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Scalar):
            return NotImplemented
        return self.datatype is other.datatype and _values_equal([self.value], [other.value])

    def __hash__(self) -> int:
        return hash(self.datatype)


@dataclass(frozen=True, slots=True, eq=False)
class HomogeneousArray:
    """Two or more entry values sharing one type, in entry order."""

    values: tuple[Any, ...]
    datatype: TypeTag

    def unwrap(self) -> Any:  # noqa: ANN401
        """Returns the values as a numpy array, or as a list for text and ragged entries."""
        if self.datatype.is_character:
            return list(self.values)

        arrays = [np.asarray(value) for value in self.values]
        if len({array.shape for array in arrays}) == 1:
            return np.stack(arrays)

        return list(self.values)

    def to_datetime(self) -> list[datetime]:
        return [dt for value in self.values for dt in epoch_to_datetime(value, self.datatype)]

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HomogeneousArray):
            return NotImplemented
        return self.datatype is other.datatype and _values_equal(self.values, other.values)

    def __hash__(self) -> int:
        return hash((self.datatype, len(self.values)))


@dataclass(frozen=True, slots=True, eq=False)
class MixedCollection:
    """Two or more entry values of differing types, in entry order."""

    items: tuple[tuple[Any, TypeTag], ...]

    def unwrap(self) -> list[Any]:
        return [value for value, _ in self.items]

    @property
    def datatypes(self) -> list[TypeTag]:
        return [datatype for _, datatype in self.items]

    def __len__(self) -> int:
        return len(self.items)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MixedCollection):
            return NotImplemented
        return self.datatypes == other.datatypes and _values_equal(self.unwrap(), other.unwrap())

    def __hash__(self) -> int:
        return hash(tuple(self.datatypes))


AggregatedValue = Absent | Scalar | HomogeneousArray | MixedCollection


def _values_equal(first: Sequence[Any], second: Sequence[Any]) -> bool:
    if len(first) != len(second):
        return False
    return all(np.array_equal(np.asarray(a), np.asarray(b)) for a, b in zip(first, second, strict=True))


@dataclass(frozen=True, slots=True)
class Aggregation:
    """Result of `aggregate_entries`.

    Attributes:
        value (AggregatedValue): The folded entry values.
        mask (EntryMask): Entry numbers that were read.
        entry_numbers (list[int]): Entry number of every collected value, in collection order.
        datatypes (list[TypeTag]): Type of every collected value, in collection order.
        diagnostics (list[Diagnostic]): Non-fatal inconsistencies found while reading.
    """

    value: AggregatedValue
    mask: EntryMask
    entry_numbers: list[int]
    datatypes: list[TypeTag]
    diagnostics: list[Diagnostic]


def fold_entries(items: Sequence[tuple[Any, TypeTag]], *,
                 attribute: str|None = None, entry_numbers: Sequence[int]|None = None) -> AggregatedValue:
    """Folds collected (value, type) pairs into a single aggregated value.

    Character entries are decoded to text first. No values are converted between
    types: if the types differ, a `MixedCollection` keeps every pair as it is.

    Args:
        items (Sequence[tuple[Any, TypeTag]]): Collected entries in collection order.
        attribute (str | None, optional): Name of the attribute, used in error messages.
        entry_numbers (Sequence[int] | None, optional): Entry number of every item,
            used in error messages.

    Returns:
        AggregatedValue: `Absent` for no items, `Scalar` for one item, `HomogeneousArray`
            if all items share one type and `MixedCollection` otherwise.

    Raises:
        CharacterDecodeError: If a character entry is not valid in the character encoding.
    """
    numbers = list(entry_numbers) if entry_numbers is not None else [None] * len(items)

    decoded = [(decode_characters(value, attribute=attribute, entry=number) if datatype.is_character else value,
                datatype)
               for (value, datatype), number in zip(items, numbers, strict=True)]

    match len(decoded):
        case 0:
            return Absent()
        case 1:
            value, datatype = decoded[0]
            return Scalar(value, datatype)
        case _:
            datatypes = {datatype for _, datatype in decoded}
            if len(datatypes) == 1:
                return HomogeneousArray(tuple(value for value, _ in decoded), datatypes.pop())
            return MixedCollection(tuple(decoded))


def validate_entry_numbers(indices: Sequence[int]) -> list[int]:
    """Checks that all requested entry numbers are non-negative integers.

    Raises:
        InvalidArgumentError: If any entry number is invalid.
    """
    validated: list[int] = []
    for index in indices:
        if isinstance(index, bool) or not isinstance(index, int | np.integer) or index < 0:
            msg = f"Invalid entry number: {index!r}! Entry numbers must be non-negative integers."
            raise InvalidArgumentError(msg)
        validated.append(int(index))

    return validated


def aggregate_entries(probe: EntryProbe, attribute: Attribute, indices: Sequence[int]|None = None) -> Aggregation:
    """Reads the entries of a global attribute and folds them into one value.

    If `indices` is given, exactly these entry numbers are read in the given order
    (duplicates are read twice). Otherwise, all existing entries from 0 to the
    maximum entry number are read in increasing order.

    Args:
        probe (EntryProbe): Access to the attribute entries of the file.
        attribute (Attribute): The attribute to read.
        indices (Sequence[int] | None, optional): Entry numbers to read. Defaults to all.

    Returns:
        Aggregation: The folded value together with the bookkeeping of the read.

    Raises:
        InvalidArgumentError: If `indices` contains invalid entry numbers.
        UnsupportedScopeError: If the attribute has variable scope.
        EntryNotFoundError: If an explicitly requested entry does not exist.
        CharacterDecodeError: If a character entry is not valid in the character encoding.
    """
    if indices is not None:
        indices = validate_entry_numbers(indices)

    inquiry = probe.inquire(attribute.name)
    if not inquiry.scope.is_global:
        msg = (f"Entries can only be aggregated for global attributes! "
               f"Attribute {inquiry.name!r} has scope {inquiry.scope.name}.")
        raise UnsupportedScopeError(msg)

    if indices is None:
        info = probe.attribute_info(inquiry.number)
        return scan_entries(probe, inquiry.name, info.num_g_entries, info.max_g_entry)

    items: list[tuple[Any, TypeTag]] = []
    for index in indices:
        if not probe.entry_exists(inquiry.name, index):
            raise EntryNotFoundError(inquiry.name, index)
        items.append(probe.get_entry(inquiry.name, index))

    return Aggregation(
        value=fold_entries(items, attribute=inquiry.name, entry_numbers=indices),
        mask=EntryMask.from_entry_numbers(indices),
        entry_numbers=list(indices),
        datatypes=[datatype for _, datatype in items],
        diagnostics=[],
    )


def scan_entries(probe: EntryProbe, name: str, num_entries: int, max_entry: int) -> Aggregation:
    """Reads every existing entry from 0 to `max_entry` in increasing order.

    Args:
        probe (EntryProbe): Access to the attribute entries of the file.
        name (str): Canonical name of the attribute.
        num_entries (int): Number of entries the file reports.
        max_entry (int): Largest entry number the file reports.

    Returns:
        Aggregation: The folded value, with a PartialEntries diagnostic if the number
            of entries found differs from `num_entries`.
    """
    flags = np.zeros(max(max_entry + 1, 0), dtype=np.bool_)
    entry_numbers: list[int] = []
    items: list[tuple[Any, TypeTag]] = []

    logger.debug(f"Reading entries 0 to {max_entry} of attribute {name!r} ...")

    for position in range(len(flags)):
        if not probe.entry_exists(name, position):
            continue

        flags[position] = True
        entry_numbers.append(position)
        items.append(probe.get_entry(name, position))

    diagnostics: list[Diagnostic] = []
    if len(items) != num_entries:
        diagnostics.append(report_partial_entries(name, num_entries, len(items)))

    return Aggregation(
        value=fold_entries(items, attribute=name, entry_numbers=entry_numbers),
        mask=EntryMask(flags),
        entry_numbers=entry_numbers,
        datatypes=[datatype for _, datatype in items],
        diagnostics=diagnostics,
    )
