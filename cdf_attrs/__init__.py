# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache 2.0

# ruff: noqa: E402, I001

# package wide variables
_strict_mode = False
_char_encoding:str = "ascii"

from cdf_attrs.settings import (
    activate_strict_mode,
    deactivate_strict_mode,
    get_char_encoding,
    is_in_strict_mode,
    set_char_encoding,
)
from cdf_attrs.errors import (
    AttributeNotFoundError,
    AttributeNotOnVariableError,
    CDFAttributeError,
    CharacterDecodeError,
    Diagnostic,
    DiagnosticKind,
    EntryNotFoundError,
    InvalidArgumentError,
    PartialEntriesError,
    UnsupportedScopeError,
)
from cdf_attrs.datatypes import Scope, TypeTag
from cdf_attrs.probe import CdflibEntryProbe, EntryProbe, InMemoryAttribute, InMemoryEntryProbe
from cdf_attrs.entry_mask import EntryMask, EntryMaskResult, build_entry_mask
from cdf_attrs.aggregation import (
    Absent,
    AggregatedValue,
    Aggregation,
    HomogeneousArray,
    MixedCollection,
    Scalar,
    aggregate_entries,
    fold_entries,
)
from cdf_attrs.attribute import Attribute, AttributeState, VariableAttributeValue
from cdf_attrs.session import CDFSession


__all__ = [
    "Absent",
    "AggregatedValue",
    "Aggregation",
    "Attribute",
    "AttributeNotFoundError",
    "AttributeNotOnVariableError",
    "AttributeState",
    "CDFAttributeError",
    "CharacterDecodeError",
    "CDFSession",
    "CdflibEntryProbe",
    "Diagnostic",
    "DiagnosticKind",
    "EntryMask",
    "EntryMaskResult",
    "EntryNotFoundError",
    "EntryProbe",
    "HomogeneousArray",
    "InMemoryAttribute",
    "InMemoryEntryProbe",
    "InvalidArgumentError",
    "MixedCollection",
    "PartialEntriesError",
    "Scalar",
    "Scope",
    "TypeTag",
    "UnsupportedScopeError",
    "VariableAttributeValue",
    "activate_strict_mode",
    "aggregate_entries",
    "build_entry_mask",
    "deactivate_strict_mode",
    "fold_entries",
    "get_char_encoding",
    "is_in_strict_mode",
    "set_char_encoding",
]
