# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
import typing
from pathlib import Path

import cdflib  # type: ignore[reportMissingTypeStubs]

from cdf_attrs.attribute import Attribute, VariableAttributeValue
from cdf_attrs.probe import CdflibEntryProbe
from cdf_attrs.utils import validate_name

if typing.TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from cdf_attrs.aggregation import AggregatedValue, Aggregation
    from cdf_attrs.entry_mask import EntryMaskResult
    from cdf_attrs.probe import EntryProbe

logger = logging.getLogger(__name__)


class CDFSession:
    """Access to the attributes of one open CDF file.

    The session owns the `Attribute` objects it hands out: asking for the same name
    twice returns the same object, so values parsed once stay cached. Attributes
    borrow the session's probe and must not be used after the file is closed.

    Sessions are not thread safe; all attribute operations on one session have to
    be serialized by the caller.

    Attributes:
        probe (EntryProbe): Access to the attribute entries of the file.
        file_path (Path | None): Path of the opened file, if opened with `CDFSession.open`.
    """

    def __init__(self, probe: EntryProbe, file_path: Path|None = None) -> None:
        self.probe = probe
        self.file_path = file_path
        self._attributes: dict[str, Attribute] = {}

    @classmethod
    def open(cls, file_path: str|Path) -> CDFSession:
        """Opens a CDF file with cdflib.

        Args:
            file_path (str | Path): The path to the CDF file.

        Returns:
            CDFSession: A session reading attributes from the file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            msg = f"No CDF file found under path: {file_path}!"
            raise FileNotFoundError(msg)

        logger.info(f"Opening CDF file {file_path.name} ...")

        cdf_file = cdflib.CDF(str(file_path))

        return cls(CdflibEntryProbe(cdf_file), file_path)

    def __repr__(self) -> str:
        source = self.file_path.name if self.file_path is not None else type(self.probe).__name__
        return f"CDFSession({source}, {len(self._attributes)} attributes resolved)"

    def attribute(self, name: str, *, is_global: bool = True) -> Attribute:
        """Returns the attribute with the given name.

        The attribute is created in the `Constructed` state on first request and
        reused afterwards. Names are matched case-insensitively, like in the file
        itself. Nothing is read from the file.

        Args:
            name (str): The attribute name.
            is_global (bool, optional): Whether the attribute is expected to be global.
                Only used when the attribute is created. Defaults to `True`.

        Raises:
            InvalidArgumentError: If `name` is not a non-empty string.
        """
        name = validate_name(name, "attribute")
        key = name.strip().lower()

        if key not in self._attributes:
            self._attributes[key] = Attribute(self.probe, name, is_global=is_global)

        return self._attributes[key]

    def global_attribute_value(self, name: str) -> AggregatedValue:
        """Returns the value of a global attribute, parsing it on first access."""
        return self.attribute(name).get_value()

    def global_attributes(self, names: Iterable[str]) -> dict[str, AggregatedValue]:
        """Returns the values of several global attributes.

        Args:
            names (Iterable[str]): The attribute names.

        Returns:
            dict[str, AggregatedValue]: Values by attribute name, in the given order.
        """
        return {name: self.global_attribute_value(name) for name in names}

    def variable_attribute_value(self, name: str, variable_name: str) -> VariableAttributeValue:
        """Returns the value a variable attribute holds for one variable.

        Variable values are not cached, so the lookup does not go through the
        attributes owned by the session.
        """
        return Attribute(self.probe, name, is_global=False).parse_variable(variable_name)

    def entry_mask(self, name: str, *, with_types: bool = False) -> EntryMaskResult:
        return self.attribute(name).entry_mask(with_types=with_types)

    def aggregate(self, name: str, indices: Sequence[int]|None = None) -> Aggregation:
        return self.attribute(name).aggregate(indices)
