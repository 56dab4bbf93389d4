"""
Directive Variants

Every action tag found in a field's misc annotation is represented as a
small immutable object, never as a raw string.

This separates:
    - Parsing (directive_parser: misc text -> variants)
    - Policy (metadata_filter: variants + presence facts -> decisions)

ARCHITECTURAL RULE:
    Variants carry parsed parameters only.
    They do NOT know about record data or rendering mode.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class DirectiveTag(Enum):
    """
    The action tag vocabulary understood by the filter.

    Values are the tag names as written in misc, without the
    host's "@" prefix.
    """

    HIDDEN = "HIDDEN-PDF"
    HIDDEN_DATA = "PDF-HIDDENDATA"
    HIDDEN_NO_DATA = "PDF-HIDDENNODATA"
    NO_ENUM = "PDF-NOENUM"
    DATA_NO_ENUM = "PDF-DATANOENUM"
    WHITESPACE = "PDF-WHITESPACE"
    FIELD_NOTE_EMPTY = "PDF-FIELDNOTEEMPTY"
    FIELD_NOTE_DATA = "PDF-FIELDNOTEDATA"

    @classmethod
    def lookup(cls, name: str) -> Optional["DirectiveTag"]:
        """Return the tag for a name, or None for tags we do not handle."""
        try:
            return cls(name)
        except ValueError:
            return None


class Directive:
    """Base class for all parsed directives."""

    tag: DirectiveTag


@dataclass(frozen=True)
class Hidden(Directive):
    """HIDDEN-PDF: drop the field, nothing else is evaluated."""

    tag = DirectiveTag.HIDDEN


@dataclass(frozen=True)
class HiddenData(Directive):
    """
    PDF-HIDDENDATA[="field"]

    Without target: hide when rendering saved data.
    With target: hide when the target field has a value.
    """

    target: Optional[str] = None
    tag = DirectiveTag.HIDDEN_DATA


@dataclass(frozen=True)
class HiddenNoData(Directive):
    """
    PDF-HIDDENNODATA[="field"]

    Without target: hide on the blank form.
    With target: hide when the target field has no value.
    """

    target: Optional[str] = None
    tag = DirectiveTag.HIDDEN_NO_DATA


@dataclass(frozen=True)
class NoEnum(Directive):
    """PDF-NOENUM: render an enumerated field as a text line."""

    tag = DirectiveTag.NO_ENUM


@dataclass(frozen=True)
class DataNoEnum(Directive):
    """PDF-DATANOENUM: like NoEnum, but only when the field has a value."""

    tag = DirectiveTag.DATA_NO_ENUM


@dataclass(frozen=True)
class WhiteSpace(Directive):
    """
    PDF-WHITESPACE="n"

    lines is None when the parameter was missing or not numeric;
    the directive then has no effect.
    """

    lines: Optional[int] = None
    tag = DirectiveTag.WHITESPACE


@dataclass(frozen=True)
class FieldNoteEmpty(Directive):
    """PDF-FIELDNOTEEMPTY="text": note replacement for the blank form."""

    text: Optional[str] = None
    tag = DirectiveTag.FIELD_NOTE_EMPTY


@dataclass(frozen=True)
class FieldNoteData(Directive):
    """PDF-FIELDNOTEDATA="text": note replacement when a value is present."""

    text: Optional[str] = None
    tag = DirectiveTag.FIELD_NOTE_DATA
