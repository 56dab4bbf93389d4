"""
Tests for metadata and record data serialization.

Host rows must survive the trip through FieldDescriptor with their
extra columns intact.
"""

import json

import pytest
from pdftags.metadata_filter import filter_metadata
from pdftags.model import FieldDescriptor
from pdftags.serialization import (
    MetadataError,
    field_from_dict,
    field_to_dict,
    filter_result_to_dict,
    metadata_from_json,
    metadata_from_list,
    metadata_from_yaml,
    metadata_to_json,
    metadata_to_yaml,
    record_data_from_dict,
    record_data_from_json,
)


def build_sample_metadata():
    return [
        FieldDescriptor(
            field_name="consent",
            element_type="radio",
            element_enum="1, Yes\\n0, No",
            element_label="Consent?",
            misc="@PDF-NOENUM",
            extra={"form_name": "consent_form", "branching_logic": None},
        ),
        FieldDescriptor(field_name="notes", element_type="notes", element_note="Optional"),
    ]


def test_extra_columns_preserved():
    row = {
        "field_name": "dob",
        "element_type": "text",
        "misc": None,
        "form_name": "demographics",
        "field_order": 3,
    }
    attr = field_from_dict(row)
    assert attr.misc == ""
    assert attr.extra == {"form_name": "demographics", "field_order": 3}
    out = field_to_dict(attr)
    assert out["form_name"] == "demographics"
    assert out["field_order"] == 3
    assert out["misc"] == ""


def test_missing_element_type_defaults_to_text():
    assert field_from_dict({"field_name": "x"}).element_type == "text"


@pytest.mark.parametrize("row", [{}, {"field_name": ""}, ["field_name"]])
def test_unusable_rows(row):
    with pytest.raises(MetadataError):
        field_from_dict(row)


def test_metadata_must_be_list():
    with pytest.raises(MetadataError):
        metadata_from_list({"field_name": "x"})


def test_duplicate_field_names():
    with pytest.raises(MetadataError, match="dup"):
        metadata_from_list([{"field_name": "dup"}, {"field_name": "dup"}])


def test_json_roundtrip():
    fields = build_sample_metadata()
    assert metadata_from_json(metadata_to_json(fields)) == fields


def test_yaml_roundtrip():
    fields = build_sample_metadata()
    assert metadata_from_yaml(metadata_to_yaml(fields)) == fields


def test_record_data_normalized():
    data = record_data_from_dict({1: {"ev": {"a": None, "b": 2}}})
    assert data == {"1": {"ev": {"a": "", "b": "2"}}}


def test_record_data_empty():
    assert record_data_from_json("{}") == {}
    assert record_data_from_json("null") == {}


def test_record_data_bad_shape():
    with pytest.raises(MetadataError):
        record_data_from_dict({"1": ["not", "events"]})


def test_filter_result_is_json_serializable():
    fields = build_sample_metadata()
    result = filter_metadata(fields, {"1": {"ev": {"consent": "1"}}})
    d = filter_result_to_dict(result)
    assert d["mode"] == "with_data"
    assert d["edits"] == [
        {"record": "1", "event": "ev", "field_name": "consent", "old_value": "1", "new_value": "Yes"}
    ]
    assert d["fields"][0]["element_type"] == "text"
    assert d["presence"] == {"consent": "1", "notes": None}
    json.dumps(d)
