"""
Core Form Model Objects

Defines the data structures the directive interpreter works on:
    - FieldDescriptor (one form field, as exported by the host)
    - RecordData (record -> event -> field -> raw value)
    - Rendering mode (empty template vs. form with saved data)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about directive parsing
        - Know nothing about PDF rendering
        - Are plain, copyable data
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, Optional


# Element types whose stored value is a key into element_enum
ENUMERATED_TYPES: FrozenSet[str] = frozenset({"sql", "select", "radio"})

# Element type a field is converted to when its enumeration is suppressed
TEXT_TYPE = "text"

# Placeholder record id the host uses when rendering a blank form
PLACEHOLDER_RECORD = ""


# record id -> event id -> field name -> raw value
RecordData = Dict[str, Dict[str, Dict[str, str]]]


class RenderMode(Enum):
    """
    Which kind of PDF the host is producing.

    EMPTY_TEMPLATE: a blank form, no record bound
    WITH_DATA: a form populated with saved record values
    """

    EMPTY_TEMPLATE = "empty"
    WITH_DATA = "with_data"


@dataclass
class FieldDescriptor:
    """
    A single form field as described by the host's metadata export.

    Properties:
        field_name:
            Unique identifier. Key into the presence map and record data.

        element_type:
            Rendering kind ("text", "radio", "select", "sql", "notes", ...).
            Open set; only ENUMERATED_TYPES support enum directives.

        element_enum:
            Raw enumeration spec, "key, label" lines separated by the
            host's line-break marker. Empty for non-enumerated types.

        element_label:
            Label text. May be rewritten by the filter.

        element_note:
            Helper text shown under the field. May be rewritten.

        misc:
            Free-text annotation holding the directive tags.

        extra:
            Any additional host columns, carried through untouched.

    IMPORTANT:
        The filter never mutates descriptors it was given.
        It works on copies (see copy()).
    """

    field_name: str
    element_type: str = TEXT_TYPE
    element_enum: str = ""
    element_label: str = ""
    element_note: str = ""
    misc: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)

    def copy(self) -> "FieldDescriptor":
        return replace(self, extra=dict(self.extra))


def detect_mode(data: Optional[RecordData]) -> RenderMode:
    """
    Decide whether the host is rendering a blank form or saved data.

    The host signals a blank form either with no records at all or
    with a single placeholder record keyed by the empty string.

    Args:
        data: Record data as supplied by the host

    Returns:
        RenderMode
    """
    if not data:
        return RenderMode.EMPTY_TEMPLATE
    if set(data.keys()) == {PLACEHOLDER_RECORD}:
        return RenderMode.EMPTY_TEMPLATE
    return RenderMode.WITH_DATA


def has_value(value: Any) -> bool:
    """A stored value counts as present unless it is missing or empty."""
    return value is not None and value != ""
