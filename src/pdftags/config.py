"""
Filter configuration.

Holds the few knobs the interpreter exposes. Defaults reproduce the
host's behaviour; a YAML document can override them:

    enumerated_types: [sql, select, radio]
    text_type: text
    unmatched_enum: pass_through   # or: blank
    line_break: "\\n"
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet

import yaml

from pdftags.model import ENUMERATED_TYPES, TEXT_TYPE


class ConfigError(Exception):
    """Raised when a configuration document cannot be used."""
    pass


class UnmatchedEnumPolicy(Enum):
    """
    What to store when a value has no entry in the field's enum spec.

    PASS_THROUGH: keep the raw stored value
    BLANK: store the empty string
    """

    PASS_THROUGH = "pass_through"
    BLANK = "blank"


@dataclass(frozen=True)
class FilterConfig:
    """
    Knobs of one filter run.

    Properties:
        enumerated_types: Element types PDF-NOENUM and PDF-DATANOENUM act on
        text_type: Element type an enumerated field is converted to
        unmatched_enum: Policy for stored values missing from the enum spec
        line_break: String PDF-WHITESPACE appends to the label per line
    """

    enumerated_types: FrozenSet[str] = field(default_factory=lambda: ENUMERATED_TYPES)
    text_type: str = TEXT_TYPE
    unmatched_enum: UnmatchedEnumPolicy = UnmatchedEnumPolicy.PASS_THROUGH
    line_break: str = "\n"


DEFAULT_CONFIG = FilterConfig()


def config_to_dict(config: FilterConfig) -> Dict[str, Any]:
    return {
        "enumerated_types": sorted(config.enumerated_types),
        "text_type": config.text_type,
        "unmatched_enum": config.unmatched_enum.value,
        "line_break": config.line_break,
    }


def config_from_dict(d: Dict[str, Any] | None) -> FilterConfig:
    if not d:
        return DEFAULT_CONFIG
    if not isinstance(d, dict):
        raise ConfigError(f"Configuration must be a mapping, got {type(d).__name__}")

    unknown = set(d) - set(config_to_dict(DEFAULT_CONFIG))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")

    types = d.get("enumerated_types", sorted(DEFAULT_CONFIG.enumerated_types))
    if isinstance(types, str) or not all(isinstance(t, str) for t in types):
        raise ConfigError("enumerated_types must be a list of element type names")

    try:
        policy = UnmatchedEnumPolicy(d.get("unmatched_enum", DEFAULT_CONFIG.unmatched_enum.value))
    except ValueError:
        raise ConfigError(f"Invalid unmatched_enum policy: {d.get('unmatched_enum')!r}")

    return FilterConfig(
        enumerated_types=frozenset(types),
        text_type=str(d.get("text_type", DEFAULT_CONFIG.text_type)),
        unmatched_enum=policy,
        line_break=str(d.get("line_break", DEFAULT_CONFIG.line_break)),
    )


def config_from_yaml(s: str) -> FilterConfig:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML configuration: {e}")
    return config_from_dict(d)


def config_to_yaml(config: FilterConfig) -> str:
    return yaml.safe_dump(config_to_dict(config))


def load_config(filepath: str) -> FilterConfig:
    """
    Load a FilterConfig from a YAML file.

    Raises:
        FileNotFoundError: If file doesn't exist
        ConfigError: If the document is invalid
    """
    with open(filepath, "r", encoding="utf-8") as f:
        return config_from_yaml(f.read())
