# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

import codecs
import logging

import cdf_attrs as ca

logger = logging.getLogger(__name__)


def activate_strict_mode() -> None:
    """Activates the package's strict mode.

    By default, a mismatch between the number of entries an attribute reports and
    the number of entries actually found in the file is only logged and returned
    as a PartialEntries diagnostic, since many archived files contain such
    mismatches. In strict mode, a `PartialEntriesError` is raised instead.
    """
    ca._strict_mode = True  # noqa: SLF001 # type: ignore[Private]
    logger.info("Strict mode activated: partial attribute entries will raise an error.")


def deactivate_strict_mode() -> None:
    """Deactivates the package's strict mode."""
    ca._strict_mode = False  # noqa: SLF001 # type: ignore[Private]


def is_in_strict_mode() -> bool:
    """Checks if the package's strict mode is currently active.

    Returns:
        bool: `True` if strict mode is active, `False` otherwise.
    """
    return ca._strict_mode  # noqa: SLF001 # type: ignore[Private]


def set_char_encoding(encoding: str) -> None:
    """Sets the encoding used to decode character entries delivered as bytes.

    Decoding is strict: bytes that are not valid in this encoding raise a
    `CharacterDecodeError` naming the attribute and entry.

    Args:
        encoding (str): Name of a Python codec, e.g. "ascii", "latin-1" or "utf-8".

    Raises:
        ca.InvalidArgumentError: If the encoding is unknown to Python.
    """
    try:
        codecs.lookup(encoding)
    except LookupError as e:
        msg = f"Unknown character encoding: {encoding}!"
        raise ca.InvalidArgumentError(msg) from e

    ca._char_encoding = encoding  # noqa: SLF001 # type: ignore[Private]


def get_char_encoding() -> str:
    """Retrieves the encoding used to decode character entries.

    Returns:
        str: The name of the encoding. Defaults to "ascii".
    """
    return ca._char_encoding  # noqa: SLF001 # type: ignore[Private]
