"""pretty-erd -- Translate ERD text documents to Graphviz DOT."""

from __future__ import annotations

from .types import (
    Attribute,
    Cardinality,
    Diagram,
    Entity,
    GlobalOption,
    Relation,
    RenderOptions,
    Statement,
)
from .options import (
    AttributeOptions,
    EntityOptions,
    HeaderOptions,
    RelationshipOptions,
    TitleOptions,
)
from .errors import ErdError, ErdOptionError, ErdSemanticError, ErdSyntaxError
from .parser import parse_statements
from .assembler import assemble_diagram, parse_erd
from .renderer import render_dot

__all__ = [
    "render_erd",
    "parse_erd",
    "parse_statements",
    "assemble_diagram",
    "render_dot",
    "RenderOptions",
    "Diagram",
    "Entity",
    "Attribute",
    "Relation",
    "Cardinality",
    "GlobalOption",
    "Statement",
    "HeaderOptions",
    "EntityOptions",
    "AttributeOptions",
    "RelationshipOptions",
    "TitleOptions",
    "ErdError",
    "ErdSyntaxError",
    "ErdSemanticError",
    "ErdOptionError",
]


def render_erd(
    text: str,
    options: RenderOptions | None = None,
) -> str:
    """Render ERD text to a DOT string."""
    return render_dot(parse_erd(text), options)
