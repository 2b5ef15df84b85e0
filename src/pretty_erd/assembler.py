from __future__ import annotations

import logging

from .errors import ErdSemanticError
from .options import EntityOptions, HeaderOptions, RelationshipOptions, TitleOptions
from .parser import parse_statements
from .types import (
    Attribute,
    Diagram,
    Entity,
    GlobalOption,
    GlobalOptionCategory,
    Relation,
    Statement,
)

# ============================================================================
# Document assembler
#
# Folds the statement list into a Diagram:
#   1. Entities and relations are collected in order; attributes attach to
#      the most recent entity.
#   2. Global directives accumulate per category, later keys overwriting
#      earlier ones, wherever they appear in the document.
#   3. Each accumulator is coerced once and merged into every object of its
#      category as defaults. Locally set options always win.
# ============================================================================

logger = logging.getLogger(__name__)


def parse_erd(text: str) -> Diagram:
    """Parse an ERD document into a resolved Diagram.

    Raises:
        ErdError: On the first syntax or semantic error in the document.
    """
    return assemble_diagram(parse_statements(text))


def assemble_diagram(statements: list[Statement]) -> Diagram:
    """Build a resolved Diagram from parsed statements."""
    diagram = Diagram()
    directives: dict[GlobalOptionCategory, dict[str, str]] = {
        "title": {},
        "header": {},
        "entity": {},
        "relationship": {},
    }
    # Index into diagram.entities of the entity receiving attributes
    current: int | None = None

    for statement in statements:
        if isinstance(statement, Entity):
            diagram.entities.append(statement)
            current = len(diagram.entities) - 1
        elif isinstance(statement, Attribute):
            if current is None:
                raise ErdSemanticError(
                    f'found attribute "{statement.name}" without a preceding entity '
                    "to attach it to"
                )
            diagram.entities[current].attributes.append(statement)
        elif isinstance(statement, Relation):
            diagram.relationships.append(statement)
        elif isinstance(statement, GlobalOption):
            directives[statement.category].update(statement.options)
        else:
            raise TypeError(f"unexpected statement: {statement!r}")

    _apply_directives(diagram, directives)
    logger.debug(
        "assembled %d entities and %d relationships",
        len(diagram.entities),
        len(diagram.relationships),
    )
    return diagram


def _apply_directives(
    diagram: Diagram,
    directives: dict[GlobalOptionCategory, dict[str, str]],
) -> None:
    """Merge accumulated global defaults into every object of their category."""
    # Coerce up front so a bad default fails even when nothing receives it
    header_defaults = HeaderOptions.from_mapping(directives["header"])
    entity_defaults = EntityOptions.from_mapping(directives["entity"])
    relationship_defaults = RelationshipOptions.from_mapping(directives["relationship"])
    diagram.title = TitleOptions.from_mapping(directives["title"])

    for category, options in directives.items():
        if options:
            logger.debug("%s defaults: %s", category, options)

    for entity in diagram.entities:
        entity.header_options.merge_defaults(header_defaults)
        entity.options.merge_defaults(entity_defaults)

    for relation in diagram.relationships:
        relation.options.merge_defaults(relationship_defaults)
