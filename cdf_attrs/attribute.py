# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import typing
from enum import Enum
from typing import Any, NamedTuple

from cdf_attrs.aggregation import (
    Absent,
    AggregatedValue,
    Aggregation,
    HomogeneousArray,
    Scalar,
    aggregate_entries,
    scan_entries,
)
from cdf_attrs.datatypes import Scope, TypeTag, decode_characters
from cdf_attrs.entry_mask import EntryMaskResult, build_entry_mask
from cdf_attrs.errors import AttributeNotOnVariableError, Diagnostic, report_scope_mismatch
from cdf_attrs.utils import timed_function, validate_name

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

    from cdf_attrs.probe import EntryProbe

logger = logging.getLogger(__name__)


class AttributeState(Enum):
    """Enum for the resolution state of an attribute.

    Attributes:
        Constructed (str): Only name and requested scope are known.
        Resolved (str): Number, scope and (for global attributes) value have been read from the file.
    """

    Constructed = "Constructed"
    Resolved = "Resolved"


class VariableAttributeValue(NamedTuple):
    """Value of a variable attribute for one variable."""
    value: Any
    datatype: TypeTag


class Attribute:
    """A global or variable attribute of a CDF file.

    Instances are created by `CDFSession.attribute` and borrow the session's entry
    probe. Name and requested scope are fixed at construction. Number, scope,
    datatype and value are filled in by `parse_global`; until then the attribute
    is in the `Constructed` state.

    Attributes:
        probe (EntryProbe): Access to the attribute entries of the file.
    """

    __slots__ = "_datatype", "_is_global", "_name", "_number", "_scope", "_state", "_value", "probe"

    def __init__(self, probe: EntryProbe, name: str, *, is_global: bool = True) -> None:
        """Initializes an Attribute instance.

        Args:
            probe (EntryProbe): Access to the attribute entries of the file.
            name (str): The attribute name.
            is_global (bool, optional): Whether the attribute is requested as a global
                attribute. Defaults to `True`.

        Raises:
            InvalidArgumentError: If `name` is not a non-empty string.
        """
        self._name = validate_name(name, "attribute")
        self._is_global = is_global
        self.probe = probe

        self._number: int|None = None
        self._scope: Scope|None = None
        self._datatype: TypeTag|None = None
        self._value: AggregatedValue|None = None
        self._state = AttributeState.Constructed

    def __repr__(self) -> str:
        scope = self._scope.name if self._scope is not None else "unknown scope"
        return f"Attribute {self._name!r} ({scope}, {self._state.value})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_global(self) -> bool:
        return self._is_global

    @property
    def number(self) -> int|None:
        return self._number

    @property
    def scope(self) -> Scope|None:
        return self._scope

    @property
    def datatype(self) -> TypeTag|None:
        """Type shared by all entries, or `None` if unresolved, empty or of mixed type."""
        return self._datatype

    @property
    def value(self) -> AggregatedValue|None:
        """Cached value, or `None` if unresolved or without entries."""
        return self._value

    @property
    def state(self) -> AttributeState:
        return self._state

    @timed_function("Parsing global attribute")
    def parse_global(self) -> list[Diagnostic]:
        """Reads number, scope and all entries of the attribute into the cache.

        A scope in the file that disagrees with the scope the attribute was requested
        with is reported as a diagnostic and the scope found in the file is used. If
        the attribute has no entries, the value and datatype caches stay empty.
        Calling this method again reads the file again.

        Returns:
            list[Diagnostic]: Non-fatal inconsistencies found while reading.

        Raises:
            AttributeNotFoundError: If the file does not contain the attribute.
        """
        inquiry = self.probe.inquire(self._name)

        diagnostics: list[Diagnostic] = []
        if not inquiry.scope.is_global:
            msg = (f"Attribute is parsed as a global attribute, but the file declares {inquiry.scope.name}. "
                   f"Only global entries are read.")
            diagnostics.append(report_scope_mismatch(self._name, msg))
        elif not self._is_global:
            msg = f"Attribute was requested with variable scope, but the file declares {inquiry.scope.name}."
            diagnostics.append(report_scope_mismatch(self._name, msg))

        info = self.probe.attribute_info(inquiry.number)
        aggregation = scan_entries(self.probe, inquiry.name, info.num_g_entries, info.max_g_entry)
        diagnostics.extend(aggregation.diagnostics)

        # only assign once everything was read successfully
        self._number = inquiry.number
        self._scope = inquiry.scope
        match aggregation.value:
            case Absent():
                self._value = None
                self._datatype = None
            case Scalar(datatype=datatype) | HomogeneousArray(datatype=datatype):
                self._value = aggregation.value
                self._datatype = datatype
            case _:
                self._value = aggregation.value
                self._datatype = None
        self._state = AttributeState.Resolved

        logger.debug(f"Resolved {self!r}.")

        return diagnostics

    def parse_variable(self, variable_name: str) -> VariableAttributeValue:
        """Reads the entry of this attribute for one variable.

        The value is not cached, since one attribute holds entries for many variables.

        Args:
            variable_name (str): The name of the variable.

        Returns:
            VariableAttributeValue: The value (character data decoded to text) and its type.

        Raises:
            InvalidArgumentError: If `variable_name` is not a non-empty string.
            AttributeNotFoundError: If the file does not contain the attribute.
            AttributeNotOnVariableError: If the variable has no entry for this attribute
                or the attribute is not a variable attribute.
            CharacterDecodeError: If the character data is not valid in the character encoding.
        """
        variable_name = validate_name(variable_name, "variable")

        entry = self.probe.get_variable_entry(self._name, variable_name)
        if not entry.found or entry.datatype is None:
            raise AttributeNotOnVariableError(self._name, variable_name)

        value = entry.value
        if entry.datatype.is_character:
            value = decode_characters(entry.value, attribute=self._name, entry=variable_name)

        return VariableAttributeValue(value, entry.datatype)

    def entry_mask(self, *, with_types: bool = False) -> EntryMaskResult:
        """Returns which entry numbers of this global attribute hold a value.

        See `build_entry_mask`.
        """
        return build_entry_mask(self.probe, self, with_types=with_types)

    def aggregate(self, indices: Sequence[int]|None = None) -> Aggregation:
        """Reads and folds the entries of this global attribute without touching the cache.

        See `aggregate_entries`.
        """
        return aggregate_entries(self.probe, self, indices)

    def get_value(self, indices: Sequence[int]|None = None) -> AggregatedValue:
        """Returns the value of this global attribute.

        Without `indices`, the attribute is parsed if necessary and the cached value
        is returned (`Absent` for attributes without entries). With `indices`, the
        requested entries are read from the file.

        Args:
            indices (Sequence[int] | None, optional): Entry numbers to read. Defaults to all.

        Returns:
            AggregatedValue: The attribute value.
        """
        if indices is not None:
            return self.aggregate(indices).value

        if self._state is AttributeState.Constructed:
            self.parse_global()

        return self._value if self._value is not None else Absent()

    def to_dict(self) -> dict[str, Any]:
        """Returns the identity and cached value of the attribute as a plain dictionary.

        The attribute is parsed first if it has not been resolved yet.
        """
        if self._state is AttributeState.Constructed:
            self.parse_global()

        return {
            "name": self._name,
            "number": self._number,
            "scope": self._scope.name,
            "datatype": self._datatype.cdf_name if self._datatype is not None else None,
            "value": self._value.unwrap() if self._value is not None else None,
        }
