"""
Directive Analyzer — inventory and diagnostics of action tags in a form.

This module provides lightweight analysis of form metadata:
    - Directive usage inventory
    - Hide directives pointing at unknown fields
    - Directives that can never take effect (wrong type, bad parameter)
    - Enum specs the substitution step cannot read fully

IMPORTANT: This is read-only. It does NOT modify metadata and it
does NOT need record data. The filter silently ignores everything
reported here; this report is how a form designer finds out.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Set

from pdftags.config import DEFAULT_CONFIG, FilterConfig
from pdftags.directive_parser import parse_directives, tokenize_misc
from pdftags.directives import DirectiveTag
from pdftags.metadata_filter import split_enum_lines
from pdftags.model import FieldDescriptor


@dataclass
class DirectiveReport:
    """Analysis report for one form's metadata."""

    total_fields: int = 0
    fields_with_directives: int = 0

    # Usage
    tag_usage: Dict[str, int] = field(default_factory=dict)
    always_hidden: List[str] = field(default_factory=list)

    # Problems (field name -> detail)
    unknown_targets: Dict[str, List[str]] = field(default_factory=dict)
    enum_directive_on_non_enum: List[str] = field(default_factory=list)
    invalid_whitespace: List[str] = field(default_factory=list)
    missing_note_text: List[str] = field(default_factory=list)
    malformed_parameters: Dict[str, List[str]] = field(default_factory=dict)
    malformed_enum_lines: Dict[str, List[str]] = field(default_factory=dict)

    warnings: List[str] = field(default_factory=list)

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def _malformed_enum_lines(element_enum: str) -> List[str]:
    return [
        line.strip()
        for line in split_enum_lines(element_enum)
        if line.strip() and "," not in line
    ]


def analyze_directives(
    fields: List[FieldDescriptor],
    config: FilterConfig = DEFAULT_CONFIG,
) -> DirectiveReport:
    """
    Inventory the action tags of a form and flag the ones that cannot work.

    Returns a DirectiveReport with counts and warnings.
    """
    report = DirectiveReport(total_fields=len(fields))
    known_fields: Set[str] = {f.field_name for f in fields}
    usage: Dict[str, int] = defaultdict(int)

    for attr in fields:
        directives = parse_directives(attr.misc)
        if not directives:
            continue
        report.fields_with_directives += 1
        for tag in directives:
            usage[tag.value] += 1

        malformed = [
            token.name for token in tokenize_misc(attr.misc)
            if token.malformed and DirectiveTag.lookup(token.name) is not None
        ]
        if malformed:
            report.malformed_parameters[attr.field_name] = malformed

        if DirectiveTag.HIDDEN in directives:
            report.always_hidden.append(attr.field_name)

        for tag in (DirectiveTag.HIDDEN_NO_DATA, DirectiveTag.HIDDEN_DATA):
            directive = directives.get(tag)
            if directive is not None and directive.target and directive.target not in known_fields:
                report.unknown_targets.setdefault(attr.field_name, []).append(directive.target)

        uses_enum_tag = DirectiveTag.NO_ENUM in directives or DirectiveTag.DATA_NO_ENUM in directives
        if uses_enum_tag:
            if attr.element_type not in config.enumerated_types:
                report.enum_directive_on_non_enum.append(attr.field_name)
            else:
                bad_lines = _malformed_enum_lines(attr.element_enum)
                if bad_lines:
                    report.malformed_enum_lines[attr.field_name] = bad_lines

        whitespace = directives.get(DirectiveTag.WHITESPACE)
        if whitespace is not None and whitespace.lines is None:
            report.invalid_whitespace.append(attr.field_name)

        for tag in (DirectiveTag.FIELD_NOTE_EMPTY, DirectiveTag.FIELD_NOTE_DATA):
            note = directives.get(tag)
            if note is not None and note.text is None:
                report.missing_note_text.append(attr.field_name)
                break

    report.tag_usage = dict(usage)

    # Warning flags
    for name, targets in sorted(report.unknown_targets.items()):
        for target in targets:
            report.add_warning(f"Field '{name}' hides on unknown field '{target}'")

    if report.enum_directive_on_non_enum:
        report.add_warning(
            f"Enum directives on non-enumerated fields: {', '.join(report.enum_directive_on_non_enum)}"
        )

    if report.invalid_whitespace:
        report.add_warning(
            f"Missing or non-numeric PDF-WHITESPACE: {', '.join(report.invalid_whitespace)}"
        )

    if report.missing_note_text:
        report.add_warning(
            f"Field note directives without text: {', '.join(report.missing_note_text)}"
        )

    for name, tags in sorted(report.malformed_parameters.items()):
        report.add_warning(f"Unclosed parameter in field '{name}': {', '.join(tags)}")

    for name, lines in sorted(report.malformed_enum_lines.items()):
        report.add_warning(f"Enum lines without 'key, label' in field '{name}': {lines}")

    return report
