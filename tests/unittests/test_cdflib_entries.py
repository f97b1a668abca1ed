# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from types import SimpleNamespace
from typing import Any

import pytest

import cdf_attrs as ca


class _RecordingCDF:
    """Stands in for an opened cdflib.CDF and records every attget call."""

    def __init__(self) -> None:
        self.attget_calls: list[tuple[str, int|str]] = []
        self.failing_entry: int|None = None
        self._attributes: dict[str, tuple[SimpleNamespace, dict[Any, tuple[Any, str]]]] = {
            "Sparse": (
                SimpleNamespace(name="Sparse", attribute_number=0, scope=1,
                                num_gr_entry=2, max_gr_entry=2, num_z_entry=0, max_z_entry=-1),
                {0: (1.0, "CDF_DOUBLE"), 2: (2.0, "CDF_DOUBLE")},
            ),
            "UNITS": (
                SimpleNamespace(name="UNITS", attribute_number=1, scope=2,
                                num_gr_entry=0, max_gr_entry=-1, num_z_entry=1, max_z_entry=0),
                {"flux": ("cm^-2 s^-1", "CDF_CHAR")},
            ),
        }

    def attinq(self, attribute: str) -> SimpleNamespace:
        if attribute not in self._attributes:
            msg = f"No attribute {attribute}"
            raise KeyError(msg)
        return self._attributes[attribute][0]

    def attget(self, attribute: str, entry: int|str) -> SimpleNamespace:
        self.attget_calls.append((attribute, entry))

        if entry == self.failing_entry:
            msg = "Unexpected end of file"
            raise OSError(msg)

        entries = self._attributes[attribute][1]
        if entry not in entries:
            msg = "The entry does not exist"
            raise ValueError(msg)

        value, datatype = entries[entry]
        return SimpleNamespace(Data=value, Data_Type=datatype)

    def cdf_info(self) -> SimpleNamespace:
        return SimpleNamespace(zVariables=["flux", "energy"], rVariables=[])


@pytest.mark.basic
def test_scan_reads_each_entry_once() -> None:
    cdf = _RecordingCDF()
    session = ca.CDFSession(ca.CdflibEntryProbe(cdf))

    aggregation = session.aggregate("Sparse")

    assert aggregation.value == ca.HomogeneousArray((1.0, 2.0), ca.TypeTag.DOUBLE)
    assert aggregation.entry_numbers == [0, 2]
    assert cdf.attget_calls == [("Sparse", 0), ("Sparse", 1), ("Sparse", 2)]


@pytest.mark.basic
def test_explicit_entry_out_of_range() -> None:
    cdf = _RecordingCDF()
    session = ca.CDFSession(ca.CdflibEntryProbe(cdf))

    with pytest.raises(ca.EntryNotFoundError, match="Entry 7 of attribute 'Sparse'"):
        session.aggregate("Sparse", [7])

    assert cdf.attget_calls == []


@pytest.mark.basic
def test_read_errors_are_not_hidden() -> None:
    cdf = _RecordingCDF()
    cdf.failing_entry = 1
    attribute = ca.CDFSession(ca.CdflibEntryProbe(cdf)).attribute("Sparse")

    with pytest.raises(OSError, match="Unexpected end of file"):
        attribute.parse_global()

    assert attribute.state is ca.AttributeState.Constructed


@pytest.mark.basic
def test_variable_entries() -> None:
    cdf = _RecordingCDF()
    session = ca.CDFSession(ca.CdflibEntryProbe(cdf))

    assert session.variable_attribute_value("UNITS", "flux") == ca.VariableAttributeValue("cm^-2 s^-1", ca.TypeTag.CHAR)

    # energy is variable 1, beyond the last entry of UNITS
    with pytest.raises(ca.AttributeNotOnVariableError):
        session.variable_attribute_value("UNITS", "energy")
    with pytest.raises(ca.AttributeNotOnVariableError):
        session.variable_attribute_value("UNITS", "Epoch")
    with pytest.raises(ca.AttributeNotOnVariableError):
        session.variable_attribute_value("Sparse", "flux")

    assert cdf.attget_calls == [("UNITS", "flux")]


@pytest.mark.basic
def test_variable_entry_of_unknown_attribute() -> None:
    session = ca.CDFSession(ca.CdflibEntryProbe(_RecordingCDF()))

    with pytest.raises(ca.AttributeNotFoundError, match="'NoSuchAttr' was not found"):
        session.variable_attribute_value("NoSuchAttr", "flux")
