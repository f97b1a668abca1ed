# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path

import pytest

import cdf_attrs as ca

C = ca.TypeTag.CHAR
D = ca.TypeTag.DOUBLE

GLOBAL_ATTRIBUTES = {
    "Project": {0: ("ISTP>International-Solar-Terrestrial Physics", "CDF_CHAR")},
    "Mission_group": {0: ("RBSP", "CDF_CHAR"), 1: ("Van Allen Probes", "CDF_CHAR")},
    "Calibration": {1: (0.5, "CDF_DOUBLE"), 3: (0.25, "CDF_DOUBLE")},
}


@pytest.mark.basic
def test_session_reuses_attributes() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe.from_global_attributes(GLOBAL_ATTRIBUTES))

    attribute = session.attribute("Project")

    assert session.attribute("Project") is attribute
    assert attribute.probe is session.probe


@pytest.mark.basic
def test_session_invalid_name() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe())

    with pytest.raises(ca.InvalidArgumentError):
        session.attribute("")


@pytest.mark.basic
def test_global_attributes() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe.from_global_attributes(GLOBAL_ATTRIBUTES))

    values = session.global_attributes(["Project", "Mission_group", "Calibration"])

    assert list(values) == ["Project", "Mission_group", "Calibration"]
    assert values["Project"] == ca.Scalar("ISTP>International-Solar-Terrestrial Physics", C)
    assert values["Mission_group"] == ca.HomogeneousArray(("RBSP", "Van Allen Probes"), C)
    assert values["Calibration"] == ca.HomogeneousArray((0.5, 0.25), D)
    assert session.attribute("Calibration").state is ca.AttributeState.Resolved


@pytest.mark.basic
def test_global_attributes_missing_name() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe.from_global_attributes(GLOBAL_ATTRIBUTES))

    with pytest.raises(ca.AttributeNotFoundError, match="'Source_name' was not found"):
        session.global_attributes(["Project", "Source_name"])


@pytest.mark.basic
def test_session_entry_mask_with_types() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe.from_global_attributes(GLOBAL_ATTRIBUTES))

    result = session.entry_mask("Calibration", with_types=True)

    assert result.mask.flags.tolist() == [False, True, False, True]
    assert result.datatypes == [D, D]


@pytest.mark.basic
def test_variable_attribute_value() -> None:
    entries = ca.InMemoryEntryProbe({
        "DEPEND_0": ca.InMemoryAttribute(scope=ca.Scope.VariableScope, variable_entries={"flux": ("Epoch", C)}),
    })
    session = ca.CDFSession(entries)

    assert session.variable_attribute_value("DEPEND_0", "flux").value == "Epoch"
    assert repr(session) == "CDFSession(InMemoryEntryProbe, 0 attributes resolved)"

    with pytest.raises(ca.AttributeNotOnVariableError):
        session.variable_attribute_value("DEPEND_0", "Epoch")


@pytest.mark.basic
def test_variable_attribute_value_unknown_attribute() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe.from_global_attributes(GLOBAL_ATTRIBUTES))

    with pytest.raises(ca.AttributeNotFoundError, match="'NoSuchAttr' was not found"):
        session.variable_attribute_value("NoSuchAttr", "flux")


@pytest.mark.basic
def test_variable_lookup_keeps_global_attribute_scope() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe.from_global_attributes(GLOBAL_ATTRIBUTES))

    with pytest.raises(ca.AttributeNotOnVariableError):
        session.variable_attribute_value("Project", "flux")

    attribute = session.attribute("Project")
    diagnostics = attribute.parse_global()

    assert attribute.is_global
    assert diagnostics == []


@pytest.mark.basic
def test_attribute_names_are_case_insensitive() -> None:
    session = ca.CDFSession(ca.InMemoryEntryProbe.from_global_attributes(GLOBAL_ATTRIBUTES))

    attribute = session.attribute("Project")

    assert session.attribute("project") is attribute
    assert session.attribute(" PROJECT ") is attribute
    assert session.global_attributes(["project"])["project"] is attribute.value


@pytest.mark.basic
def test_open_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="No CDF file found"):
        ca.CDFSession.open(tmp_path / "missing.cdf")
