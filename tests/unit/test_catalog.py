"""Unit tests for loading the action catalog."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from voice_trigger_workflows.widget.catalog import (
    ParameterType,
    UnknownActionError,
    load_catalog,
    load_catalog_file,
)


def test_load_catalog_preserves_order_and_types(catalog_json) -> None:
    catalog = load_catalog(catalog_json)

    assert [a.name for a in catalog] == ["Scheduled Callback", "Escalate"]
    kinds = [p.kind for p in catalog.get(0).parameters]
    assert kinds == [ParameterType.INPUT, ParameterType.SELECT, ParameterType.DATETIME]
    assert catalog.get(0).parameters[1].values == ("Sales", "Support")


def test_missing_or_null_parameters_load_as_empty() -> None:
    catalog = load_catalog(
        [{"name": "A", "url": "/a"}, {"name": "B", "url": "/b", "parameters": None}]
    )
    assert catalog.get(0).parameters == ()
    assert catalog.get(1).parameters == ()


def test_catalog_is_decoupled_from_host_object(catalog_json) -> None:
    catalog = load_catalog(catalog_json)

    catalog_json[0]["name"] = "Mutated"
    catalog_json[0]["parameters"][1]["values"].append("Billing")

    assert catalog.get(0).name == "Scheduled Callback"
    assert catalog.get(0).parameters[1].values == ("Sales", "Support")


def test_unknown_parameter_type_loads() -> None:
    catalog = load_catalog(
        [{"name": "A", "url": "/a", "parameters": [{"name": "x", "type": "unsupported"}]}]
    )
    assert catalog.get(0).parameters[0].kind is None


@pytest.mark.parametrize("action_id", [2, -1, 99, True, "0", None])
def test_get_fails_loudly_for_unknown_action(catalog_json, action_id) -> None:
    catalog = load_catalog(catalog_json)
    with pytest.raises(UnknownActionError):
        catalog.get(action_id)


def test_duplicate_parameter_names_are_rejected() -> None:
    with pytest.raises(ValidationError):
        load_catalog(
            [
                {
                    "name": "A",
                    "url": "/a",
                    "parameters": [
                        {"name": "x", "type": "input"},
                        {"name": "x", "type": "datetime"},
                    ],
                }
            ]
        )


def test_load_catalog_file(tmp_path: Path, catalog_json) -> None:
    path = tmp_path / "catalog.json"
    path.write_text(json.dumps(catalog_json), encoding="utf-8")
    assert len(load_catalog_file(path)) == 2

    path.write_text(json.dumps({"name": "not a list"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_catalog_file(path)
