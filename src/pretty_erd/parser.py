from __future__ import annotations

import logging
import re
from typing import Callable, Mapping, TypeVar

from .errors import ErdOptionError, ErdSyntaxError
from .options import AttributeOptions, RelationshipOptions, split_entity_options
from .types import (
    CARDINALITY_SYMBOLS,
    Attribute,
    Cardinality,
    Entity,
    GlobalOption,
    Relation,
    Statement,
)

# ============================================================================
# ERD parser
#
# Recursive-descent parser for the ERD language. Produces the ordered
# statement list consumed by the assembler.
#
# Supported syntax:
#   # comment
#   title {label: "Schema"}             global option directive
#   [Person] {bgcolor: "#ececfc"}       entity
#   *id                                 attribute (primary key)
#   +team_id {label: "int"}             attribute (foreign key)
#   `full name`                         quoted attribute
#   Person *--1 Team {label: "plays"}   relationship
#
# Cardinality operators:
#   ?  zero or one
#   1  exactly one
#   *  zero or more
#   +  one or more
#
# At each statement the alternatives are tried in order: directive,
# entity, relationship, attribute. Only syntax errors backtrack; option
# errors of a matched statement are final. When every alternative fails,
# the one that got furthest into the input is reported.
# ============================================================================

logger = logging.getLogger(__name__)

T = TypeVar("T")

_BLANK_OR_COMMENT = re.compile(r"(?:[ \t\r\n]+|#[^\r\n]*)*")
_END_OF_LINE = re.compile(r"[ \t]*(?:#[^\r\n]*)?(?:\r\n|\n|\Z)")
_HSPACE = re.compile(r"[ \t]*")
_BLOCK_AHEAD = re.compile(r"[ \t\r\n]*\{")

_BARE_IDENT = re.compile(r"[A-Za-z0-9_]+")
# Quoted identifiers run to the matching quote; no escapes, no control characters
_QUOTED_IDENTS = {
    '"': re.compile(r'"([^"\x00-\x1f\x7f-\x9f]*)"'),
    "'": re.compile(r"'([^'\x00-\x1f\x7f-\x9f]*)'"),
    "`": re.compile(r"`([^`\x00-\x1f\x7f-\x9f]*)`"),
}

_KEYWORD = re.compile(r"(title|header|entity|relationship)\b")
_KEY_MARKERS = re.compile(r"[*+ \t]*")
_CARDINALITY = re.compile(r"[?1*+]")
_OPTION_KEY = re.compile(r"[A-Za-z0-9]+")
_OPTION_VALUE = re.compile(r'"([^"]*)"')


def parse_statements(text: str) -> list[Statement]:
    """Parse an ERD document into its statements, in source order.

    Local option blocks are validated and coerced here; global directives
    are kept as raw strings for the assembler.

    Raises:
        ErdSyntaxError: If the text does not match the grammar.
        ErdOptionError: If a local option block is invalid for its statement.
    """
    statements = _Parser(text).parse()
    logger.debug("parsed %d statements", len(statements))
    return statements


def parse_identifier(text: str) -> tuple[str, str]:
    """Parse one identifier at the start of ``text``.

    Returns the identifier and the remaining input.
    """
    parser = _Parser(text)
    value = parser.identifier()
    return value, parser.rest()


def parse_option_block(text: str) -> tuple[list[tuple[str, str]], str]:
    """Parse one ``{ key: "value", ... }`` block at the start of ``text``.

    Returns the (key, value) pairs in source order, duplicates included,
    and the remaining input.
    """
    parser = _Parser(text)
    pairs = parser.option_block()
    return pairs, parser.rest()


class _Parser:
    """Cursor over an immutable input string."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0

    def rest(self) -> str:
        return self._text[self._pos:]

    # ------------------------------------------------------------------
    # Document and statements
    # ------------------------------------------------------------------

    def parse(self) -> list[Statement]:
        statements: list[Statement] = []
        self._skip(_BLANK_OR_COMMENT)
        while self._pos < len(self._text):
            statements.append(self._statement())
            self._skip(_BLANK_OR_COMMENT)
        return statements

    def _statement(self) -> Statement:
        start = self._pos
        failures: list[ErdSyntaxError] = []
        alternatives: tuple[Callable[[], Statement], ...] = (
            self._global_option,
            self._entity,
            self._relation,
            self._attribute,
        )
        for alternative in alternatives:
            self._pos = start
            try:
                statement = alternative()
                self._expect(_END_OF_LINE, "end_of_line", "end of line")
            except ErdSyntaxError as exc:
                failures.append(exc)
                continue
            return statement

        self._pos = start
        # Ties go to the most general alternative, the attribute
        raise max(reversed(failures), key=lambda exc: exc.offset)

    def _global_option(self) -> GlobalOption:
        keyword = self._expect(_KEYWORD, "keyword", "a global option keyword").group(1)
        if _BLOCK_AHEAD.match(self._text, self._pos) is None:
            raise self._error("option_block", f'expected an option block after "{keyword}"')
        return GlobalOption(category=keyword, options=self._trailing_options())

    def _entity(self) -> Entity:
        start = self._pos
        self._expect_literal("[", "entity")
        name = self.identifier()
        self._expect_literal("]", "entity")
        header_options, options = self._local_options(
            split_entity_options, self._trailing_options(), start
        )
        return Entity(name=name, header_options=header_options, options=options)

    def _relation(self) -> Relation:
        start = self._pos
        entity1 = self.identifier()
        card1 = self._cardinality()
        self._expect_literal("--", "relationship")
        card2 = self._cardinality()
        entity2 = self.identifier()
        options = self._local_options(
            RelationshipOptions.from_mapping, self._trailing_options(), start
        )
        return Relation(
            entity1=entity1,
            entity2=entity2,
            card1=card1,
            card2=card2,
            options=options,
        )

    def _attribute(self) -> Attribute:
        start = self._pos
        markers = self._expect(_KEY_MARKERS, "attribute", "key markers").group()
        name = self.identifier()
        options = self._local_options(
            AttributeOptions.from_mapping, self._trailing_options(), start
        )
        return Attribute(
            name=name,
            is_primary_key="*" in markers,
            is_foreign_key="+" in markers,
            options=options,
        )

    def _cardinality(self) -> Cardinality:
        op = self._expect(
            _CARDINALITY, "cardinality", "a cardinality operator (?, 1, * or +)"
        ).group()
        return CARDINALITY_SYMBOLS[op]

    def _local_options(
        self,
        build: Callable[[Mapping[str, str]], T],
        options: Mapping[str, str],
        start: int,
    ) -> T:
        try:
            return build(options)
        except ErdOptionError as exc:
            exc.line = self._line_at(start)
            raise

    # ------------------------------------------------------------------
    # Lexical primitives
    # ------------------------------------------------------------------

    def identifier(self) -> str:
        self._skip(_HSPACE)
        quote = self._text[self._pos:self._pos + 1]
        if quote in _QUOTED_IDENTS:
            value = self._expect(
                _QUOTED_IDENTS[quote], "identifier", f"a closing {quote} on the same line"
            ).group(1)
        else:
            value = self._expect(_BARE_IDENT, "identifier", "an identifier").group()
        self._skip(_HSPACE)
        return value

    def _trailing_options(self) -> dict[str, str]:
        # A block may start on a later line; newlines are only consumed
        # when a block actually follows.
        if _BLOCK_AHEAD.match(self._text, self._pos) is None:
            return {}
        self._skip(_BLANK_OR_COMMENT)
        options = dict(self.option_block())
        self._skip(_HSPACE)
        return options

    def option_block(self) -> list[tuple[str, str]]:
        self._expect_literal("{", "option_block")
        pairs: list[tuple[str, str]] = []
        self._skip(_BLANK_OR_COMMENT)
        if self._accept("}"):
            return pairs

        while True:
            pairs.append(self._option())
            self._skip(_BLANK_OR_COMMENT)
            if self._accept("}"):
                return pairs
            if not self._accept(","):
                raise self._error("option_block", 'expected "," or "}"')
            self._skip(_BLANK_OR_COMMENT)
            # Single trailing comma
            if self._accept("}"):
                return pairs

    def _option(self) -> tuple[str, str]:
        key = self._expect(_OPTION_KEY, "option", "an option name").group()
        self._skip(_BLANK_OR_COMMENT)
        self._expect_literal(":", "option")
        self._skip(_BLANK_OR_COMMENT)
        value = self._expect(
            _OPTION_VALUE, "option_value", "a double-quoted option value"
        ).group(1)
        return key, value

    # ------------------------------------------------------------------
    # Cursor helpers
    # ------------------------------------------------------------------

    def _skip(self, pattern: re.Pattern[str]) -> None:
        m = pattern.match(self._text, self._pos)
        if m is not None:
            self._pos = m.end()

    def _expect(self, pattern: re.Pattern[str], kind: str, expected: str) -> re.Match[str]:
        m = pattern.match(self._text, self._pos)
        if m is None:
            raise self._error(kind, f"expected {expected}")
        self._pos = m.end()
        return m

    def _accept(self, literal: str) -> bool:
        if self._text.startswith(literal, self._pos):
            self._pos += len(literal)
            return True
        return False

    def _expect_literal(self, literal: str, kind: str) -> None:
        if not self._accept(literal):
            raise self._error(kind, f'expected "{literal}"')

    def _line_at(self, offset: int) -> int:
        return self._text.count("\n", 0, offset) + 1

    def _error(self, kind: str, message: str) -> ErdSyntaxError:
        offset = self._pos
        line_start = self._text.rfind("\n", 0, offset) + 1
        return ErdSyntaxError(
            kind,
            message,
            line=self._line_at(offset),
            column=offset - line_start + 1,
            offset=offset,
            remaining=self._text[offset:],
        )
