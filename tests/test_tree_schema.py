"""
tests/test_tree_schema.py -- Validation of tree request bodies and the facts map.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from arboretum.schemas.tree import TreePayload, normalize_facts

BASE = {
    "name": "Oak",
    "scientificName": "Quercus robur",
    "description": "Deciduous tree.",
    "habitat": "Europe",
    "image": "https://example.com/oak.jpg",
}


class TestNormalizeFacts:
    @pytest.mark.parametrize("value", [None, "height: 40m", ["a", "b"], 42])
    def test_non_object_becomes_empty_map(self, value) -> None:
        assert normalize_facts(value) == {}

    def test_scalars_are_stringified_and_blank_keys_dropped(self) -> None:
        facts = normalize_facts({" Height ": 40, "Evergreen": False, "": "x", "Note": None})
        assert facts == {"Height": "40", "Evergreen": "false"}

    def test_nested_values_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            normalize_facts({"Zones": ["5a", "6b"]})

    def test_keys_equal_after_trimming_are_rejected(self) -> None:
        with pytest.raises(ValueError, match="more than once"):
            normalize_facts({"a": "1", " a": "2"})


class TestTreePayload:
    def test_camel_case_and_snake_case_names_are_accepted(self) -> None:
        camel = TreePayload.model_validate(BASE)
        snake = TreePayload.model_validate({**{k: v for k, v in BASE.items() if k != "scientificName"}, "scientific_name": "Quercus robur"})
        assert camel.scientific_name == snake.scientific_name == "Quercus robur"

    def test_facts_default_to_empty_map(self) -> None:
        assert TreePayload.model_validate(BASE).facts == {}

    def test_malformed_facts_default_to_empty_map(self) -> None:
        assert TreePayload.model_validate({**BASE, "facts": "oops"}).facts == {}

    @pytest.mark.parametrize("field", ["name", "scientificName", "description", "habitat", "image"])
    def test_blank_required_field_is_rejected(self, field: str) -> None:
        with pytest.raises(ValidationError):
            TreePayload.model_validate({**BASE, field: "   "})

    @pytest.mark.parametrize("field", ["name", "scientificName", "description", "habitat", "image"])
    def test_missing_required_field_is_rejected(self, field: str) -> None:
        body = {k: v for k, v in BASE.items() if k != field}
        with pytest.raises(ValidationError):
            TreePayload.model_validate(body)
