"""
Metadata Filter — applies action tags to form metadata before PDF rendering.

Pipeline for one invocation:
    1. Detect the rendering mode (blank form vs. saved data)
    2. Build the presence map from the ORIGINAL record data
    3. For each field, in order:
           parse misc -> directive variants
           interpret variants against the presence snapshot
    4. Apply the collected enum value edits to the record data

IMPORTANT:
    Presence facts are frozen before any field is interpreted.
    Enum substitution is expressed as ValueEdit objects, so no field
    ever observes a value rewritten by another field's directives.
"""

import copy
import logging
import re
import warnings
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pdftags.config import DEFAULT_CONFIG, FilterConfig, UnmatchedEnumPolicy
from pdftags.directive_parser import parse_directives
from pdftags.directives import Directive, DirectiveTag
from pdftags.model import FieldDescriptor, RecordData, RenderMode, detect_mode, has_value
from pdftags.serialization import field_from_dict, field_to_dict


log = logging.getLogger("pdftags.filter")

# Host enum specs separate lines with a literal backslash-n; real newlines also occur
_ENUM_LINE_RE = re.compile(r"\\n|\r?\n")

PresenceMap = Mapping[str, Optional[Any]]
MetadataItem = Union[FieldDescriptor, Dict[str, Any]]


@dataclass(frozen=True)
class ValueEdit:
    """One enum substitution in the record data."""

    record: str
    event: str
    field_name: str
    old_value: Any
    new_value: Any


@dataclass
class FieldDecision:
    """
    Outcome of interpreting one field's directives.

    Properties:
        include: Whether the field is rendered
        descriptor: The (possibly rewritten) copy of the field
        edits: Enum substitutions this field asks for
        dropped_by: Tag that excluded the field, if any
    """

    include: bool
    descriptor: FieldDescriptor
    edits: List[ValueEdit] = field(default_factory=list)
    dropped_by: Optional[DirectiveTag] = None


@dataclass
class FilterResult:
    """
    Result of a complete filter run.

    fields keeps input order. data is a copy of the input record data
    with the edits applied; the caller's data is left untouched.
    """

    fields: List[MetadataItem]
    mode: RenderMode
    presence: PresenceMap
    edits: List[ValueEdit]
    data: RecordData


def build_presence_map(
    fields: Iterable[FieldDescriptor],
    data: Optional[RecordData],
    mode: Optional[RenderMode] = None,
) -> PresenceMap:
    """
    Map each field name to its last non-empty value, or None.

    Later records and events overwrite earlier ones. On a blank form
    no field has a value.
    """
    if mode is None:
        mode = detect_mode(data)

    presence: Dict[str, Optional[Any]] = {}
    for attr in fields:
        value = None
        if mode is RenderMode.WITH_DATA:
            for event_data in data.values():
                for field_data in event_data.values():
                    candidate = field_data.get(attr.field_name)
                    if has_value(candidate):
                        value = candidate
        presence[attr.field_name] = value

    return MappingProxyType(presence)


def split_enum_lines(element_enum: Optional[str]) -> List[str]:
    """Split an enum spec on the host line-break marker."""
    if not element_enum:
        return []
    return _ENUM_LINE_RE.split(element_enum)


def parse_enum_spec(element_enum: Optional[str]) -> Dict[str, str]:
    """
    Turn "1, Yes\\n2, No" into {"1": "Yes", "2": "No"}.

    Each line is split on its first comma and both sides are trimmed.
    Lines without a comma are skipped.
    """
    choices: Dict[str, str] = {}
    for line in split_enum_lines(element_enum):
        if "," not in line:
            if line.strip():
                log.debug("skipping enum line without comma: %r", line)
            continue
        key, value = line.split(",", 1)
        choices[key.strip()] = value.strip()
    return choices


def _enum_edits(
    attr: FieldDescriptor,
    data: Optional[RecordData],
    config: FilterConfig,
) -> List[ValueEdit]:
    choices = parse_enum_spec(attr.element_enum)
    edits: List[ValueEdit] = []
    unmatched = set()

    for record, event_data in (data or {}).items():
        for event, field_data in event_data.items():
            raw = field_data.get(attr.field_name)
            if not has_value(raw):
                continue
            label = choices.get(str(raw))
            if label is None:
                unmatched.add(str(raw))
                if config.unmatched_enum is UnmatchedEnumPolicy.PASS_THROUGH:
                    continue
                label = ""
            edits.append(ValueEdit(record, event, attr.field_name, raw, label))

    if unmatched:
        warnings.warn(
            f"No enum label for value(s) {sorted(unmatched)} of field '{attr.field_name}'",
            UserWarning,
        )
    return edits


def interpret_directives(
    attr: FieldDescriptor,
    directives: Mapping[DirectiveTag, Directive],
    mode: RenderMode,
    presence: PresenceMap,
    data: Optional[RecordData] = None,
    config: FilterConfig = DEFAULT_CONFIG,
) -> FieldDecision:
    """
    Decide inclusion and rewrites for a single field.

    Directives are evaluated in a fixed order. Each one only runs while
    the field is still included, and the hide directives REASSIGN the
    include flag rather than combining with it.

    Args:
        attr: Field descriptor (not modified)
        directives: Parsed directives of the field
        mode: Rendering mode
        presence: Presence snapshot for all fields
        data: Record data, read only, used for enum substitution
        config: Filter configuration

    Returns:
        FieldDecision
    """
    if DirectiveTag.HIDDEN in directives:
        return FieldDecision(include=False, descriptor=attr, dropped_by=DirectiveTag.HIDDEN)

    attr = attr.copy()
    with_data = mode is RenderMode.WITH_DATA
    present = presence.get(attr.field_name) is not None
    include = True
    dropped_by = None
    edits: List[ValueEdit] = []

    hide = directives.get(DirectiveTag.HIDDEN_NO_DATA)
    if include and hide is not None:
        if hide.target is None:
            include = with_data
        elif hide.target in presence:
            include = presence[hide.target] is not None
        if not include:
            dropped_by = DirectiveTag.HIDDEN_NO_DATA

    hide = directives.get(DirectiveTag.HIDDEN_DATA)
    if include and hide is not None:
        if hide.target is None:
            include = not with_data
        elif hide.target in presence:
            include = presence[hide.target] is None
        if not include:
            dropped_by = DirectiveTag.HIDDEN_DATA

    whitespace = directives.get(DirectiveTag.WHITESPACE)
    if include and not with_data and not present and whitespace is not None:
        if whitespace.lines is not None:
            attr.element_label += config.line_break * whitespace.lines

    note = directives.get(DirectiveTag.FIELD_NOTE_EMPTY)
    if include and not with_data and note is not None and note.text is not None:
        attr.element_note = note.text

    note = directives.get(DirectiveTag.FIELD_NOTE_DATA)
    if include and with_data and note is not None and note.text is not None and present:
        attr.element_note = note.text

    if include and DirectiveTag.NO_ENUM in directives and attr.element_type in config.enumerated_types:
        if present:
            edits.extend(_enum_edits(attr, data, config))
        # Rendered as a blank line when there is no value
        attr.element_type = config.text_type

    if include and DirectiveTag.DATA_NO_ENUM in directives and attr.element_type in config.enumerated_types:
        if present:
            edits.extend(_enum_edits(attr, data, config))
            attr.element_type = config.text_type

    return FieldDecision(include=include, descriptor=attr, edits=edits, dropped_by=dropped_by)


def apply_edits(data: RecordData, edits: Iterable[ValueEdit]) -> RecordData:
    """Write edits into data in place and return it."""
    for edit in edits:
        data[edit.record][edit.event][edit.field_name] = edit.new_value
    return data


def _as_descriptor(item: MetadataItem) -> FieldDescriptor:
    if isinstance(item, FieldDescriptor):
        return item
    return field_from_dict(item)


def _run(
    metadata: Sequence[MetadataItem],
    data: Optional[RecordData],
    config: FilterConfig,
) -> Tuple[List[MetadataItem], RenderMode, PresenceMap, List[ValueEdit]]:
    descriptors = [_as_descriptor(item) for item in metadata]
    mode = detect_mode(data)
    presence = build_presence_map(descriptors, data, mode)
    log.debug("filtering %d fields in %s mode", len(descriptors), mode.value)

    kept: List[MetadataItem] = []
    edits: List[ValueEdit] = []
    for item, attr in zip(metadata, descriptors):
        decision = interpret_directives(
            attr, parse_directives(attr.misc), mode, presence, data, config
        )
        edits.extend(decision.edits)
        if decision.include:
            kept.append(field_to_dict(decision.descriptor) if isinstance(item, dict) else decision.descriptor)
        else:
            log.debug("dropping field %s (%s)", attr.field_name, decision.dropped_by.value)

    return kept, mode, presence, edits


def filter_metadata(
    metadata: Sequence[MetadataItem],
    data: Optional[RecordData],
    config: Optional[FilterConfig] = None,
) -> FilterResult:
    """
    Filter metadata without touching the caller's record data.

    Args:
        metadata: Field descriptors or host metadata rows, in form order
        data: Record data (may be empty for a blank form)
        config: Optional FilterConfig

    Returns:
        FilterResult with the substituted data in result.data
    """
    fields, mode, presence, edits = _run(metadata, data, config or DEFAULT_CONFIG)
    substituted = apply_edits(copy.deepcopy(data) if data else {}, edits)
    return FilterResult(fields=fields, mode=mode, presence=presence, edits=edits, data=substituted)


def apply_pdf_action_tags(
    metadata: Sequence[MetadataItem],
    data: Optional[RecordData],
    config: Optional[FilterConfig] = None,
) -> List[MetadataItem]:
    """
    Host entry point: filter metadata and substitute enum values in place.

    Call this right before handing metadata and data to the renderer:

        metadata = apply_pdf_action_tags(metadata, data)

    Items come back as the same kind they went in (descriptor or dict).
    """
    fields, _, _, edits = _run(metadata, data, config or DEFAULT_CONFIG)
    if edits:
        apply_edits(data, edits)
    return fields


__all__ = [
    "ValueEdit",
    "FieldDecision",
    "FilterResult",
    "build_presence_map",
    "split_enum_lines",
    "parse_enum_spec",
    "interpret_directives",
    "apply_edits",
    "filter_metadata",
    "apply_pdf_action_tags",
]
