from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from .options import (
    AttributeOptions,
    EntityOptions,
    HeaderOptions,
    RelationshipOptions,
    TitleOptions,
)

# ============================================================================
# ERD types
#
# Models the statements of an ERD document and the resolved diagram built
# from them. Entities, attributes and relations double as statements: the
# parser produces them with their local options, the assembler attaches
# attributes and merges global defaults into them.
# ============================================================================

# Cardinality of one end of a relationship:
#   'zero-one'   ?  rendered {0,1}
#   'one'        1  rendered 1
#   'zero-many'  *  rendered 0..N
#   'many'       +  rendered 1..N
Cardinality = Literal["zero-one", "one", "zero-many", "many"]

CARDINALITY_SYMBOLS: dict[str, Cardinality] = {
    "?": "zero-one",
    "1": "one",
    "*": "zero-many",
    "+": "many",
}

CARDINALITY_LABELS: dict[Cardinality, str] = {
    "zero-one": "{0,1}",
    "one": "1",
    "zero-many": "0..N",
    "many": "1..N",
}

GlobalOptionCategory = Literal["title", "header", "entity", "relationship"]


@dataclass(slots=True)
class Attribute:
    """A single field of an entity."""

    name: str
    is_primary_key: bool = False
    is_foreign_key: bool = False
    options: AttributeOptions = field(default_factory=AttributeOptions)


@dataclass(slots=True)
class Entity:
    """An entity (table) with its attributes in declaration order."""

    name: str
    attributes: list[Attribute] = field(default_factory=list)
    # Table and header-row styling
    header_options: HeaderOptions = field(default_factory=HeaderOptions)
    # Entity-level styling
    options: EntityOptions = field(default_factory=EntityOptions)


@dataclass(slots=True)
class Relation:
    """A relationship between two entities, referenced by name.

    entity1 is the tail of the edge and entity2 the head; card1 belongs to
    entity1 and card2 to entity2.
    """

    entity1: str
    entity2: str
    card1: Cardinality
    card2: Cardinality
    options: RelationshipOptions = field(default_factory=RelationshipOptions)


@dataclass(slots=True)
class GlobalOption:
    """A directive supplying default options for a whole category."""

    category: GlobalOptionCategory
    options: dict[str, str] = field(default_factory=dict)


Statement = Union[GlobalOption, Entity, Attribute, Relation]


@dataclass(slots=True)
class Diagram:
    """Resolved ERD diagram -- every default merged, every value coerced."""

    entities: list[Entity] = field(default_factory=list)
    relationships: list[Relation] = field(default_factory=list)
    title: TitleOptions = field(default_factory=TitleOptions)


# ============================================================================
# Render options -- user-facing configuration of the DOT output
# ============================================================================

Direction = Literal["LR", "RL", "TB", "BT"]


@dataclass(slots=True)
class RenderOptions:
    """Graph-wide rendering settings. Unset values fall back to styles.DEFAULTS."""

    direction: Direction | None = None
    splines: str | None = None
    # Default node font face
    font: str | None = None
    edge_color: str | None = None
    edge_style: str | None = None
    edge_minlen: int | None = None
