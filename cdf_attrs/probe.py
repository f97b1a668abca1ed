# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

"""Read-only access to attribute entries of a CDF file.

All attribute resolution in this package goes through the `EntryProbe` protocol.
`CdflibEntryProbe` implements it on top of `cdflib.CDF`, `InMemoryEntryProbe` on
top of plain dictionaries.
"""

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Protocol

from cdf_attrs.datatypes import Scope, TypeTag
from cdf_attrs.errors import AttributeNotFoundError, EntryNotFoundError, InvalidArgumentError

if typing.TYPE_CHECKING:
    from collections.abc import Mapping

    import cdflib  # type: ignore[reportMissingTypeStubs]

logger = logging.getLogger(__name__)

# raised by cdflib.CDF.attget for an entry number inside the entry range that holds no value
_MISSING_ENTRY_ERRORS = (KeyError, ValueError)


class AttributeInquiry(NamedTuple):
    """Identity of an attribute as stored in the file."""
    name: str
    number: int
    scope: Scope
    max_r_entry: int
    max_z_entry: int


class AttributeInfo(NamedTuple):
    """Entry counters of an attribute.

    Global attributes use the g-entry counters, variable attributes the r-entry
    (record varying) and z-entry counters. A maximum of -1 means no entries.
    """
    num_g_entries: int
    max_g_entry: int
    num_r_entries: int
    max_r_entry: int
    num_z_entries: int
    max_z_entry: int


class VariableEntry(NamedTuple):
    """Result of looking up the entry of a variable attribute for one variable."""
    found: bool
    value: Any = None
    datatype: TypeTag|None = None


class EntryProbe(Protocol):
    """Capability to query attribute entries of an open file."""

    def inquire(self, attribute: str) -> AttributeInquiry:
        """Returns the canonical name, number, scope and maximum entries of an attribute.

        Raises:
            AttributeNotFoundError: If the file has no attribute with this name.
        """
        ...

    def attribute_info(self, number: int) -> AttributeInfo:
        """Returns the entry counters of the attribute with the given number."""
        ...

    def entry_exists(self, attribute: str, entry: int) -> bool:
        """Checks whether the entry with the given number holds a value."""
        ...

    def get_entry(self, attribute: str, entry: int) -> tuple[Any, TypeTag]:
        """Returns value and type of an existing entry.

        The result is undefined if `entry_exists` is `False` for this entry.
        """
        ...

    def get_variable_entry(self, attribute: str, variable: str) -> VariableEntry:
        """Returns the entry of a variable attribute for the given variable.

        Raises:
            AttributeNotFoundError: If the file has no attribute with this name.
        """
        ...


class CdflibEntryProbe:
    """EntryProbe reading attributes through `cdflib.CDF`.

    Attribute descriptors and variable names are read once and cached, since the
    file is opened read-only. The most recently read entry is kept, so that
    `get_entry` following `entry_exists` does not read the entry twice.

    Attributes:
        cdf (cdflib.CDF): The opened CDF file.
    """

    def __init__(self, cdf: cdflib.CDF) -> None:
        self.cdf = cdf
        self._names_by_number: dict[int, str] = {}
        self._adrs: dict[str|int, Any] = {}
        self._variables: tuple[list[str], list[str]]|None = None
        self._last_entry: tuple[str, int|str, Any]|None = None

    def inquire(self, attribute: str) -> AttributeInquiry:
        adr = self._attinq(attribute)

        self._names_by_number[int(adr.attribute_number)] = str(adr.name).strip()

        return AttributeInquiry(
            name=str(adr.name).strip(),
            number=int(adr.attribute_number),
            scope=Scope(adr.scope),
            max_r_entry=int(adr.max_gr_entry),
            max_z_entry=int(adr.max_z_entry),
        )

    def attribute_info(self, number: int) -> AttributeInfo:
        # look up by name where possible, cdflib bounds attribute numbers by the zVariable count
        adr = self._attinq(self._names_by_number.get(number, number))

        num_gr_entries = int(adr.num_gr_entry)
        max_gr_entry = int(adr.max_gr_entry)

        # global and r-variable entries share the same counters in a CDF file
        return AttributeInfo(
            num_g_entries=num_gr_entries,
            max_g_entry=max_gr_entry,
            num_r_entries=num_gr_entries,
            max_r_entry=max_gr_entry,
            num_z_entries=int(adr.num_z_entry),
            max_z_entry=int(adr.max_z_entry),
        )

    def entry_exists(self, attribute: str, entry: int) -> bool:
        adr = self._attinq(attribute)
        if entry < 0 or entry > int(adr.max_gr_entry):
            return False

        return self._attget(attribute, entry) is not None

    def get_entry(self, attribute: str, entry: int) -> tuple[Any, TypeTag]:
        adr = self._attinq(attribute)
        if entry < 0 or entry > int(adr.max_gr_entry):
            raise EntryNotFoundError(attribute, entry)

        att_data = self._attget(attribute, entry)
        if att_data is None:
            raise EntryNotFoundError(attribute, entry)

        return att_data.Data, TypeTag(att_data.Data_Type)

    def get_variable_entry(self, attribute: str, variable: str) -> VariableEntry:
        adr = self._attinq(attribute)
        if Scope(adr.scope).is_global:
            return VariableEntry(found=False)

        z_variables, r_variables = self._variable_names()
        if variable.strip().lower() in z_variables:
            max_entry = int(adr.max_z_entry)
            number = z_variables.index(variable.strip().lower())
        elif variable.strip().lower() in r_variables:
            max_entry = int(adr.max_gr_entry)
            number = r_variables.index(variable.strip().lower())
        else:
            logger.debug(f"The file has no variable {variable!r}.")
            return VariableEntry(found=False)

        if number > max_entry:
            return VariableEntry(found=False)

        att_data = self._attget(attribute, variable)
        if att_data is None:
            return VariableEntry(found=False)

        return VariableEntry(found=True, value=att_data.Data, datatype=TypeTag(att_data.Data_Type))

    def _attinq(self, attribute: str|int) -> Any:  # noqa: ANN401
        if attribute not in self._adrs:
            try:
                self._adrs[attribute] = self.cdf.attinq(attribute)  # type: ignore[reportUnknownMemberType]
            except KeyError as e:
                raise AttributeNotFoundError(str(attribute)) from e

        return self._adrs[attribute]

    def _variable_names(self) -> tuple[list[str], list[str]]:
        # variable numbers are positions in these lists, names are matched case-insensitively like in cdflib
        if self._variables is None:
            info = self.cdf.cdf_info()  # type: ignore[reportUnknownMemberType]
            self._variables = ([str(name).strip().lower() for name in info.zVariables],
                               [str(name).strip().lower() for name in info.rVariables])

        return self._variables

    def _attget(self, attribute: str, entry: int|str) -> Any:  # noqa: ANN401
        if self._last_entry is not None and self._last_entry[:2] == (attribute, entry):
            return self._last_entry[2]

        try:
            att_data = self.cdf.attget(attribute, entry)  # type: ignore[reportUnknownMemberType]
        except _MISSING_ENTRY_ERRORS:
            logger.debug(f"No entry {entry!r} for attribute {attribute!r}.")
            att_data = None

        self._last_entry = (attribute, entry, att_data)

        return att_data


@dataclass
class InMemoryAttribute:
    """Attribute content held by an `InMemoryEntryProbe`.

    Attributes:
        scope (Scope): The declared scope of the attribute.
        entries (dict[int, tuple[Any, TypeTag]]): Global (or r-variable) entries by entry number.
        variable_entries (dict[str, tuple[Any, TypeTag]]): Variable entries by variable name.
        reported_num_entries (int | None): Entry count reported to callers. Defaults to
            the number of stored entries.
        reported_max_entry (int | None): Maximum entry number reported to callers.
            Defaults to the largest stored entry number, or -1.
    """
    scope: Scope = Scope.GlobalScope
    entries: dict[int, tuple[Any, TypeTag]] = field(default_factory=dict[int, tuple[Any, TypeTag]])
    variable_entries: dict[str, tuple[Any, TypeTag]] = field(default_factory=dict[str, tuple[Any, TypeTag]])
    reported_num_entries: int|None = None
    reported_max_entry: int|None = None

    @property
    def num_entries(self) -> int:
        if self.reported_num_entries is not None:
            return self.reported_num_entries
        return len(self.entries)

    @property
    def max_entry(self) -> int:
        if self.reported_max_entry is not None:
            return self.reported_max_entry
        return max(self.entries, default=-1)


class InMemoryEntryProbe:
    """EntryProbe serving attributes from dictionaries.

    Useful for metadata that has already been loaded into memory, and for files
    whose reported entry counts should be reproduced exactly.

    Attributes:
        attributes (dict[str, InMemoryAttribute]): Attribute contents by name, in file order.
    """

    def __init__(self, attributes: Mapping[str, InMemoryAttribute]|None = None) -> None:
        self.attributes: dict[str, InMemoryAttribute] = dict(attributes) if attributes is not None else {}

    @classmethod
    def from_global_attributes(cls, global_attributes: Mapping[str, Mapping[int, tuple[Any, TypeTag|str]]]) -> InMemoryEntryProbe:
        """Creates a probe holding only global attributes.

        Args:
            global_attributes (Mapping): Maps attribute names to {entry number: (value, type)}.
                Types may be given as `TypeTag` or as CDF type names like "CDF_DOUBLE".

        Returns:
            InMemoryEntryProbe: The new probe.
        """
        attributes = {
            name: InMemoryAttribute(
                scope=Scope.GlobalScope,
                entries={int(entry): (value, TypeTag(datatype)) for entry, (value, datatype) in entries.items()},
            )
            for name, entries in global_attributes.items()
        }

        return cls(attributes)

    def inquire(self, attribute: str) -> AttributeInquiry:
        name = self._canonical_name(attribute)
        content = self.attributes[name]

        return AttributeInquiry(
            name=name,
            number=list(self.attributes).index(name),
            scope=content.scope,
            max_r_entry=content.max_entry,
            max_z_entry=len(content.variable_entries) - 1,
        )

    def attribute_info(self, number: int) -> AttributeInfo:
        names = list(self.attributes)
        if number < 0 or number >= len(names):
            msg = f"Invalid attribute number: {number}!"
            raise InvalidArgumentError(msg)

        content = self.attributes[names[number]]

        return AttributeInfo(
            num_g_entries=content.num_entries,
            max_g_entry=content.max_entry,
            num_r_entries=content.num_entries,
            max_r_entry=content.max_entry,
            num_z_entries=len(content.variable_entries),
            max_z_entry=len(content.variable_entries) - 1,
        )

    def entry_exists(self, attribute: str, entry: int) -> bool:
        return entry in self.attributes[self._canonical_name(attribute)].entries

    def get_entry(self, attribute: str, entry: int) -> tuple[Any, TypeTag]:
        return self.attributes[self._canonical_name(attribute)].entries[entry]

    def get_variable_entry(self, attribute: str, variable: str) -> VariableEntry:
        content = self.attributes[self._canonical_name(attribute)]
        if content.scope.is_global or variable not in content.variable_entries:
            return VariableEntry(found=False)

        value, datatype = content.variable_entries[variable]
        return VariableEntry(found=True, value=value, datatype=datatype)

    def _find_name(self, attribute: str) -> str|None:
        # attribute names are matched case-insensitively, like in cdflib
        for name in self.attributes:
            if name.strip().lower() == attribute.strip().lower():
                return name
        return None

    def _canonical_name(self, attribute: str) -> str:
        name = self._find_name(attribute)
        if name is None:
            raise AttributeNotFoundError(attribute)
        return name
