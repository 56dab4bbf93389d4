"""
Directive Parser for Action Tags (misc annotation -> Directive variants).

The host stores action tags as free text in a field's misc column:

    @HIDDEN-PDF
    @PDF-HIDDENDATA="other_field"
    @PDF-WHITESPACE='3' @PDF-FIELDNOTEEMPTY="Print clearly"

Syntax Notes:
    - A tag is a whole token: it may carry the host's "@" prefix, and it
      must not be glued to surrounding word characters
    - A tag may be followed by =<q>value<q>, where <q> is whatever
      character comes right after "=" (usually " or ')
    - Quoted values are skipped as a unit, so tag-like text inside a
      parameter is never read as a tag
    - Unknown tags (other host action tags) are ignored
    - Malformed parameters never raise; they read as "no parameter"
"""

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from pdftags.directives import (
    DataNoEnum,
    Directive,
    DirectiveTag,
    FieldNoteData,
    FieldNoteEmpty,
    Hidden,
    HiddenData,
    HiddenNoData,
    NoEnum,
    WhiteSpace,
)


log = logging.getLogger("pdftags.parser")

TAG_PREFIX = "@"

_TAG_RE = re.compile(
    r"(?<![\w@-])@?(?P<name>[A-Za-z][A-Za-z0-9_]*(?:-[A-Za-z0-9_]+)*)(?![\w-])"
)

# Integer-ish strings a host would accept as numeric: " 3", "+2", "2.5", "1e1"
_NUMERIC_RE = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")

# Delimiters that open a value of a host tag we do not handle
_QUOTES = ("\"", "'")


@dataclass(frozen=True)
class TagToken:
    """A tag occurrence in misc text."""

    name: str
    param: Optional[str]
    has_equals: bool

    @property
    def malformed(self) -> bool:
        """True when '=' was written but no closed quoted value followed."""
        return self.has_equals and self.param is None


def _read_quoted(text: str, pos: int) -> Tuple[Optional[str], int]:
    """
    Read a delimited value starting at pos (the character after '=').

    Returns:
        (value, position after the closing delimiter), or (None, pos)
        if there is no delimiter or it is never closed.
    """
    if pos >= len(text):
        return None, pos
    quote = text[pos]
    end = text.find(quote, pos + 1)
    if end == -1:
        return None, pos
    return text[pos + 1:end], end + 1


def tokenize_misc(misc: Optional[str]) -> List[TagToken]:
    """
    Split misc text into tag tokens, in order of appearance.

    Every word-like token is returned, including tags the filter does
    not know about; callers look up the ones they care about.

    Known tags take whatever character follows "=" as the delimiter.
    Other host tags only have their value skipped when it is quoted
    with " or ', so @CHARLIMIT=2 does not swallow the tags after it.
    """
    tokens: List[TagToken] = []
    if not misc:
        return tokens

    pos = 0
    while True:
        match = _TAG_RE.search(misc, pos)
        if match is None:
            break
        end = match.end()
        param = None
        has_equals = end < len(misc) and misc[end] == "="
        name = match.group("name")
        if has_equals:
            if DirectiveTag.lookup(name) is not None or misc[end + 1:end + 2] in _QUOTES:
                param, after = _read_quoted(misc, end + 1)
                end = after if param is not None else end + 1
            else:
                end += 1
        tokens.append(TagToken(name, param, has_equals))
        pos = end

    return tokens


def get_tag_param(misc: Optional[str], tag: str) -> Optional[str]:
    """
    Extract the parameter of a tag.

    Args:
        misc: Annotation text to search
        tag: Tag name, with or without the "@" prefix

    Returns:
        The text between the quote delimiters of the first occurrence
        that carries a parameter, or None when there is none.
    """
    name = tag[len(TAG_PREFIX):] if tag.startswith(TAG_PREFIX) else tag
    for token in tokenize_misc(misc):
        if token.name == name and token.param is not None:
            return token.param
    return None


def parse_line_count(param: Optional[str]) -> Optional[int]:
    """
    Interpret a PDF-WHITESPACE parameter.

    Numeric strings are truncated to an int and clamped at zero.
    Anything else gives None.
    """
    if param is None or not _NUMERIC_RE.match(param):
        return None
    try:
        return max(0, int(float(param)))
    except (ValueError, OverflowError):
        return None


def _build_directive(tag: DirectiveTag, token: TagToken) -> Directive:
    param = token.param
    if tag is DirectiveTag.HIDDEN:
        return Hidden()
    if tag is DirectiveTag.HIDDEN_DATA:
        return HiddenData(target=param or None)
    if tag is DirectiveTag.HIDDEN_NO_DATA:
        return HiddenNoData(target=param or None)
    if tag is DirectiveTag.NO_ENUM:
        return NoEnum()
    if tag is DirectiveTag.DATA_NO_ENUM:
        return DataNoEnum()
    if tag is DirectiveTag.WHITESPACE:
        return WhiteSpace(lines=parse_line_count(param))
    if tag is DirectiveTag.FIELD_NOTE_EMPTY:
        return FieldNoteEmpty(text=param)
    return FieldNoteData(text=param)


def parse_directives(misc: Optional[str]) -> Dict[DirectiveTag, Directive]:
    """
    Parse a field's misc annotation into directive variants.

    Each tag yields at most one directive. When a tag is repeated, the
    first occurrence carrying a parameter wins, otherwise the first one.

    Args:
        misc: Annotation text

    Returns:
        Mapping of tag -> Directive, in order of first appearance
    """
    chosen: Dict[DirectiveTag, TagToken] = {}
    for token in tokenize_misc(misc):
        tag = DirectiveTag.lookup(token.name)
        if tag is None:
            continue
        if token.malformed:
            log.debug("ignoring malformed parameter of %s in %r", token.name, misc)
        current = chosen.get(tag)
        if current is None or (current.param is None and token.param is not None):
            chosen[tag] = token

    return {tag: _build_directive(tag, token) for tag, token in chosen.items()}


__all__ = [
    "TAG_PREFIX",
    "TagToken",
    "tokenize_misc",
    "get_tag_param",
    "parse_line_count",
    "parse_directives",
]
