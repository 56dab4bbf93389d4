"""
Serialization helpers for form metadata and record data.

Host metadata rows are plain dicts carrying the six descriptor columns
plus whatever else the host exports; unknown columns are kept in
FieldDescriptor.extra and written back unchanged.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List

import yaml

from pdftags.model import FieldDescriptor, RecordData


class MetadataError(Exception):
    """Raised when a metadata document is structurally unusable."""
    pass


DESCRIPTOR_KEYS = (
    "field_name",
    "element_type",
    "element_enum",
    "element_label",
    "element_note",
    "misc",
)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def field_to_dict(f: FieldDescriptor) -> Dict[str, Any]:
    d = dict(f.extra)
    d.update({
        "field_name": f.field_name,
        "element_type": f.element_type,
        "element_enum": f.element_enum,
        "element_label": f.element_label,
        "element_note": f.element_note,
        "misc": f.misc,
    })
    return d


def field_from_dict(d: Dict[str, Any]) -> FieldDescriptor:
    if not isinstance(d, dict):
        raise MetadataError(f"Metadata row must be a mapping, got {type(d).__name__}")
    if not d.get("field_name"):
        raise MetadataError(f"Metadata row without field_name: {d!r}")
    return FieldDescriptor(
        field_name=str(d["field_name"]),
        element_type=_text(d.get("element_type", "text")),
        element_enum=_text(d.get("element_enum")),
        element_label=_text(d.get("element_label")),
        element_note=_text(d.get("element_note")),
        misc=_text(d.get("misc")),
        extra={k: v for k, v in d.items() if k not in DESCRIPTOR_KEYS},
    )


def metadata_to_list(fields: List[FieldDescriptor]) -> List[Dict[str, Any]]:
    return [field_to_dict(f) for f in fields]


def metadata_from_list(rows: Any) -> List[FieldDescriptor]:
    if not isinstance(rows, list):
        raise MetadataError(f"Metadata must be a list of rows, got {type(rows).__name__}")
    fields = [field_from_dict(row) for row in rows]
    names = [f.field_name for f in fields]
    if len(names) != len(set(names)):
        duplicates = {name for name in names if names.count(name) > 1}
        raise MetadataError(f"Duplicate field names: {sorted(duplicates)}")
    return fields


def metadata_to_json(fields: List[FieldDescriptor]) -> str:
    return json.dumps(metadata_to_list(fields), sort_keys=True)


def metadata_from_json(s: str) -> List[FieldDescriptor]:
    return metadata_from_list(json.loads(s))


def metadata_to_yaml(fields: List[FieldDescriptor]) -> str:
    return yaml.safe_dump(metadata_to_list(fields), sort_keys=False)


def metadata_from_yaml(s: str) -> List[FieldDescriptor]:
    return metadata_from_list(yaml.safe_load(s))


def record_data_from_dict(d: Any) -> RecordData:
    """Normalize record data: keys become strings, None values become ""."""
    if not d:
        return {}
    if not isinstance(d, dict):
        raise MetadataError(f"Record data must be a mapping, got {type(d).__name__}")
    data: RecordData = {}
    for record, events in d.items():
        if not isinstance(events, dict):
            raise MetadataError(f"Events of record {record!r} must be a mapping")
        data[str(record)] = {
            str(event): {str(k): _text(v) for k, v in (values or {}).items()}
            for event, values in events.items()
        }
    return data


def record_data_from_json(s: str) -> RecordData:
    return record_data_from_dict(json.loads(s))


def filter_result_to_dict(result) -> Dict[str, Any]:
    """JSON-able view of a FilterResult."""
    return {
        "mode": result.mode.value,
        "fields": [
            field_to_dict(f) if isinstance(f, FieldDescriptor) else dict(f)
            for f in result.fields
        ],
        "presence": dict(result.presence),
        "edits": [
            {
                "record": e.record,
                "event": e.event,
                "field_name": e.field_name,
                "old_value": e.old_value,
                "new_value": e.new_value,
            }
            for e in result.edits
        ],
        "data": result.data,
    }
