from __future__ import annotations

import re
from dataclasses import dataclass, fields
from typing import ClassVar, Literal, Mapping

from .errors import ErdOptionError

# ============================================================================
# Option groups
#
# Each kind of diagram object accepts its own subset of a shared option
# vocabulary. A group is a dataclass whose field names are the option keys,
# plus one KINDS table mapping key -> kind. The table drives both coercion
# and unknown-key detection.
#
# Kinds:
#   text   verbatim (labels)
#   color  verbatim (color names, #RRGGBB)
#   font   verbatim (font face)
#   int    small non-negative integer, 0..255
#   align  LEFT | CENTER | RIGHT, case-insensitive
#
# An unset option is None, so "set locally" is simply "not None" when
# global defaults are merged in.
# ============================================================================

OptionKind = Literal["text", "color", "font", "int", "align"]

ALIGNMENTS = ("LEFT", "CENTER", "RIGHT")
MAX_SMALL_INT = 255

_DIGITS = re.compile(r"[0-9]+")


class _OptionGroup:
    """Shared behaviour of the option group dataclasses."""

    __slots__ = ()

    GROUP: ClassVar[str]
    KINDS: ClassVar[dict[str, OptionKind]]

    @classmethod
    def from_mapping(cls, options: Mapping[str, str]):
        """Build the group from raw option strings, coercing every value.

        Raises ErdOptionError for a key outside the group's vocabulary or a
        value that does not coerce to the key's kind.
        """
        return cls(**coerce_options(options, cls.KINDS, cls.GROUP))

    def merge_defaults(self, defaults: _OptionGroup) -> None:
        """Fill every option not set locally from ``defaults``."""
        for f in fields(self):
            if getattr(self, f.name) is None:
                setattr(self, f.name, getattr(defaults, f.name))


@dataclass(slots=True)
class HeaderOptions(_OptionGroup):
    """Container and header-row styling of an entity table."""

    GROUP = "header"
    KINDS = {
        "size": "int",
        "font": "font",
        "color": "color",
        "bgcolor": "color",
        "border": "int",
        "cellborder": "int",
        "cellspacing": "int",
        "cellpadding": "int",
    }

    # Header font size
    size: int | None = None
    font: str | None = None
    # Header font color
    color: str | None = None
    # Header cell background
    bgcolor: str | None = None
    # Table border width
    border: int | None = None
    cellborder: int | None = None
    cellspacing: int | None = None
    cellpadding: int | None = None


@dataclass(slots=True)
class EntityOptions(_OptionGroup):
    """Entity-level styling."""

    GROUP = "entity"
    KINDS = {
        "label": "text",
        "size": "int",
        "font": "font",
        "color": "color",
        "bgcolor": "color",
        "bordercolor": "color",
    }

    # Replaces the entity name in the header row
    label: str | None = None
    # Title font size, used when the header sets none
    size: int | None = None
    font: str | None = None
    color: str | None = None
    # Table background
    bgcolor: str | None = None
    bordercolor: str | None = None


@dataclass(slots=True)
class AttributeOptions(_OptionGroup):
    GROUP = "attribute"
    KINDS = {
        "label": "text",
        "align": "align",
        "color": "color",
        "bgcolor": "color",
        "font": "font",
        "border": "int",
        "bordercolor": "color",
    }

    label: str | None = None
    align: str = "LEFT"
    color: str | None = None
    bgcolor: str | None = None
    font: str | None = None
    border: int | None = None
    bordercolor: str | None = None


@dataclass(slots=True)
class RelationshipOptions(_OptionGroup):
    GROUP = "relationship"
    KINDS = {
        "label": "text",
        "color": "color",
        "size": "int",
        "font": "font",
    }

    label: str | None = None
    color: str | None = None
    # Line weight
    size: int | None = None
    font: str | None = None


@dataclass(slots=True)
class TitleOptions(_OptionGroup):
    """Diagram-wide title. No title is rendered without a label."""

    GROUP = "title"
    KINDS = {
        "label": "text",
        "size": "int",
        "color": "color",
        "font": "font",
    }

    label: str | None = None
    size: int = 30
    color: str | None = None
    font: str | None = None


def coerce_options(
    options: Mapping[str, str],
    kinds: Mapping[str, OptionKind],
    group: str,
) -> dict[str, str | int]:
    """Coerce raw option strings according to a group's kind table."""
    coerced: dict[str, str | int] = {}
    for key, raw in options.items():
        kind = kinds.get(key)
        if kind is None:
            raise ErdOptionError.unknown_key(key, group)
        coerced[key] = _coerce_value(key, raw, kind, group)
    return coerced


def _coerce_value(key: str, raw: str, kind: OptionKind, group: str) -> str | int:
    if kind == "int":
        if not _DIGITS.fullmatch(raw) or int(raw) > MAX_SMALL_INT:
            raise ErdOptionError.bad_value(
                key, group, raw, f"an integer between 0 and {MAX_SMALL_INT}"
            )
        return int(raw)
    if kind == "align":
        upper = raw.upper()
        if upper not in ALIGNMENTS:
            raise ErdOptionError.bad_value(key, group, raw, "one of " + ", ".join(ALIGNMENTS))
        return upper
    return raw


def split_entity_options(options: Mapping[str, str]) -> tuple[HeaderOptions, EntityOptions]:
    """Build both option groups of an entity from one local option block.

    Each group keeps only the keys it recognizes. Unknown keys and bad
    values are errors for the entity as a whole.
    """
    coerced = coerce_options(options, {**HeaderOptions.KINDS, **EntityOptions.KINDS}, "entity")
    header = HeaderOptions(**{k: v for k, v in coerced.items() if k in HeaderOptions.KINDS})
    entity = EntityOptions(**{k: v for k, v in coerced.items() if k in EntityOptions.KINDS})
    return header, entity
