# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import cdf_attrs as ca

logger = logging.getLogger(__name__)


class CDFAttributeError(Exception):
    """Base class of all errors raised while resolving CDF attributes."""


class InvalidArgumentError(CDFAttributeError, ValueError):
    """Raised for malformed attribute names, variable names or entry numbers."""


class AttributeNotFoundError(CDFAttributeError, KeyError):
    """Raised if the file does not contain an attribute with the requested name."""

    def __init__(self, attribute: str) -> None:
        self.attribute = attribute
        super().__init__(f"Attribute {attribute!r} was not found in file!")

    def __str__(self) -> str:
        return str(self.args[0])


class AttributeNotOnVariableError(CDFAttributeError, KeyError):
    """Raised if a variable has no entry for the requested attribute."""

    def __init__(self, attribute: str, variable: str) -> None:
        self.attribute = attribute
        self.variable = variable
        super().__init__(f"Variable {variable!r} does not have the attribute {attribute!r}!")

    def __str__(self) -> str:
        return str(self.args[0])


class EntryNotFoundError(CDFAttributeError, KeyError):
    """Raised if an explicitly requested entry number does not hold a value."""

    def __init__(self, attribute: str, entry: int) -> None:
        self.attribute = attribute
        self.entry = entry
        super().__init__(f"Entry {entry} of attribute {attribute!r} does not exist!")

    def __str__(self) -> str:
        return str(self.args[0])


class CharacterDecodeError(CDFAttributeError, ValueError):
    """Raised if character entry data is not valid in the package wide character encoding.

    Attributes:
        attribute (str | None): The attribute holding the entry, if known.
        entry (int | str | None): The entry number, or the variable name for variable entries.
        encoding (str): The encoding that failed.
    """

    def __init__(self, encoding: str, attribute: str|None = None, entry: int|str|None = None) -> None:
        self.encoding = encoding
        self.attribute = attribute
        self.entry = entry

        if attribute is None:
            location = "Character data"
        elif isinstance(entry, str):
            location = f"Entry for variable {entry!r} of attribute {attribute!r}"
        elif entry is None:
            location = f"Character data of attribute {attribute!r}"
        else:
            location = f"Entry {entry} of attribute {attribute!r}"

        super().__init__(f"{location} cannot be decoded as {encoding}! "
                         f"Use cdf_attrs.set_char_encoding to select the encoding of the file.")


class UnsupportedScopeError(CDFAttributeError, TypeError):
    """Raised if an operation is invoked on an attribute with the wrong scope."""


class PartialEntriesError(CDFAttributeError):
    """Raised instead of a PartialEntries diagnostic when strict mode is active."""


class DiagnosticKind(Enum):
    """Enum for the kinds of non-fatal inconsistencies found while reading attributes.

    Attributes:
        PartialEntries (str): The entry count reported by the file differs from the
            number of entries observed during a scan.
        ScopeMismatch (str): The scope found in the file disagrees with the scope the
            attribute was requested with.
    """

    PartialEntries = "PartialEntries"
    ScopeMismatch = "ScopeMismatch"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal inconsistency reported alongside a successful result."""

    kind: DiagnosticKind
    message: str


def report_partial_entries(attribute: str, reported: int, observed: int) -> Diagnostic:
    """Creates a PartialEntries diagnostic, or raises if strict mode is active.

    Parameters:
        attribute (str): The name of the attribute that was scanned.
        reported (int): The number of entries the file claims to hold.
        observed (int): The number of entries actually found.

    Returns:
        Diagnostic: The logged diagnostic.

    Raises:
        PartialEntriesError: If strict mode is active.
    """
    msg = (f"Attribute {attribute!r} reports {reported} entries, "
           f"but {observed} entries were found in the file!")

    if ca.is_in_strict_mode():
        raise PartialEntriesError(msg)

    logger.warning(msg)
    return Diagnostic(DiagnosticKind.PartialEntries, msg)


def report_scope_mismatch(attribute: str, msg: str) -> Diagnostic:
    logger.warning(f"Scope mismatch for attribute {attribute!r}: {msg}")
    return Diagnostic(DiagnosticKind.ScopeMismatch, msg)
