# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import typing
from dataclasses import dataclass, field

import numpy as np

from cdf_attrs.errors import Diagnostic, UnsupportedScopeError, report_partial_entries

if typing.TYPE_CHECKING:
    from numpy.typing import NDArray

    from cdf_attrs.attribute import Attribute
    from cdf_attrs.datatypes import TypeTag
    from cdf_attrs.probe import EntryProbe

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True, eq=False)
class EntryMask:
    """Record of which entry numbers of an attribute hold a value.

    Attributes:
        flags (NDArray[np.bool_]): One flag per entry number from 0 to the maximum entry.
        count (int): The number of set flags.
    """

    flags: NDArray[np.bool_]
    count: int = field(init=False)

    def __post_init__(self) -> None:
        flags = np.array(self.flags, dtype=np.bool_).ravel()
        flags.flags.writeable = False

        object.__setattr__(self, "flags", flags)
        object.__setattr__(self, "count", int(np.count_nonzero(flags)))

    @classmethod
    def empty(cls, length: int = 0) -> EntryMask:
        return cls(np.zeros(length, dtype=np.bool_))

    @classmethod
    def from_entry_numbers(cls, entry_numbers: typing.Iterable[int], length: int|None = None) -> EntryMask:
        """Creates a mask with the flags of the given entry numbers set.

        Args:
            entry_numbers (Iterable[int]): Entry numbers holding a value. Duplicates are allowed.
            length (int | None): Length of the mask. Defaults to the largest entry number + 1.
        """
        entry_numbers = list(entry_numbers)
        if length is None:
            length = max(entry_numbers, default=-1) + 1

        flags = np.zeros(length, dtype=np.bool_)
        flags[entry_numbers] = True

        return cls(flags)

    @property
    def entry_numbers(self) -> list[int]:
        """Returns the entry numbers that hold a value, in increasing order."""
        return [int(i) for i in np.flatnonzero(self.flags)]

    def __len__(self) -> int:
        return len(self.flags)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntryMask):
            return NotImplemented
        return bool(np.array_equal(self.flags, other.flags))

    def __hash__(self) -> int:
        return hash(self.flags.tobytes())

    def __repr__(self) -> str:
        return f"EntryMask({self.flags.astype(np.int8).tolist()}, count={self.count})"


@dataclass(frozen=True, slots=True)
class EntryMaskResult:
    """Result of `build_entry_mask`.

    Attributes:
        mask (EntryMask): The observed entry mask.
        datatypes (list[TypeTag] | None): Types of the existing entries in increasing
            entry order, if they were requested.
        diagnostics (list[Diagnostic]): Non-fatal inconsistencies found during the scan.
    """

    mask: EntryMask
    datatypes: list[TypeTag]|None
    diagnostics: list[Diagnostic]


def build_entry_mask(probe: EntryProbe, attribute: Attribute, *, with_types: bool = False) -> EntryMaskResult:
    """Scans all entry numbers of a global attribute and records which hold a value.

    The mask always reflects what was observed in the file. If the entry count the
    file reports differs from the observed count, a PartialEntries diagnostic is
    returned alongside the mask.

    Args:
        probe (EntryProbe): Access to the attribute entries of the file.
        attribute (Attribute): The attribute to scan.
        with_types (bool, optional): If `True`, the type of each existing entry is
            retrieved as well. Defaults to `False` since this requires decoding each entry.

    Returns:
        EntryMaskResult: The mask, the entry types if requested and any diagnostics.

    Raises:
        UnsupportedScopeError: If the attribute has variable scope.
    """
    inquiry = probe.inquire(attribute.name)
    if not inquiry.scope.is_global:
        msg = (f"Entry masks can only be built for global attributes! "
               f"Attribute {inquiry.name!r} has scope {inquiry.scope.name}.")
        raise UnsupportedScopeError(msg)

    info = probe.attribute_info(inquiry.number)

    flags = np.zeros(max(info.max_g_entry + 1, 0), dtype=np.bool_)
    datatypes: list[TypeTag]|None = [] if with_types else None

    logger.debug(f"Scanning {len(flags)} entry numbers of attribute {inquiry.name!r} ...")

    for i in range(len(flags)):
        if not probe.entry_exists(inquiry.name, i):
            continue

        if datatypes is not None:
            _, datatype = probe.get_entry(inquiry.name, i)
            datatypes.append(datatype)

        flags[i] = True

    mask = EntryMask(flags)

    diagnostics: list[Diagnostic] = []
    if mask.count != info.num_g_entries:
        diagnostics.append(report_partial_entries(inquiry.name, info.num_g_entries, mask.count))

    return EntryMaskResult(mask, datatypes, diagnostics)
