"""Tests for the document assembler.

Covers: attribute attachment, global directive cascading and precedence,
semantic errors, and the example documents in tests/fixtures.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from pretty_erd import parse_erd
from pretty_erd.assembler import assemble_diagram
from pretty_erd.errors import ErdError, ErdOptionError, ErdSemanticError
from pretty_erd.types import Attribute, Entity, GlobalOption, Relation

FIXTURES = Path(__file__).parent / "fixtures"


def read_fixture(name: str) -> str:
    return (FIXTURES / name).read_text(encoding="utf-8")


# ============================================================================
# Structure
# ============================================================================


class TestStructure:
    def test_comments_only_document_is_empty(self):
        d = parse_erd("# just a comment\n\n   # another one\n")
        assert d.entities == []
        assert d.relationships == []
        assert d.title.label is None

    def test_attributes_attach_to_most_recent_entity(self):
        d = parse_erd("[a]\n*x\n[b]\ny\nz\n")
        assert [e.name for e in d.entities] == ["a", "b"]
        assert [attr.name for attr in d.entities[0].attributes] == ["x"]
        assert [attr.name for attr in d.entities[1].attributes] == ["y", "z"]

    def test_relationship_does_not_end_the_current_entity(self):
        d = parse_erd("[a]\nx\na 1--1 a\ny\n")
        assert [attr.name for attr in d.entities[0].attributes] == ["x", "y"]
        assert len(d.relationships) == 1

    def test_duplicate_entity_names_are_kept(self):
        d = parse_erd("[a]\nx\n[a]\ny\n")
        assert len(d.entities) == 2
        assert d.entities[0].attributes[0].name == "x"
        assert d.entities[1].attributes[0].name == "y"

    def test_relationships_need_not_reference_declared_entities(self):
        d = parse_erd("ghost *--? phantom")
        assert d.entities == []
        assert d.relationships == [
            Relation(entity1="ghost", entity2="phantom", card1="zero-many", card2="zero-one")
        ]

    def test_attribute_without_entity_is_a_semantic_error(self):
        with pytest.raises(ErdSemanticError) as excinfo:
            parse_erd("# header comment\n*id\n[a]\n")
        assert not isinstance(excinfo.value, ErdOptionError)
        assert "without a preceding entity" in str(excinfo.value)
        assert '"id"' in str(excinfo.value)

    def test_assembles_hand_built_statements(self):
        d = assemble_diagram(
            [
                Entity(name="a"),
                Attribute(name="id", is_primary_key=True),
                GlobalOption(category="entity", options={"bgcolor": "red"}),
            ]
        )
        assert d.entities[0].attributes[0].is_primary_key
        assert d.entities[0].options.bgcolor == "red"

    def test_rejects_an_unknown_statement(self):
        with pytest.raises(TypeError):
            assemble_diagram(["[a]"])


# ============================================================================
# Global directives
# ============================================================================


class TestGlobalDefaults:
    def test_local_option_overrides_global(self):
        d = parse_erd('entity {color: "red"}\n[e] {color: "blue"}\n')
        assert d.entities[0].options.color == "blue"

    def test_global_option_fills_unset_option(self):
        d = parse_erd('entity {color: "red"}\n[e]\n')
        assert d.entities[0].options.color == "red"

    def test_directive_applies_to_entities_declared_before_it(self):
        d = parse_erd('[e]\nentity {color: "red"}\n')
        assert d.entities[0].options.color == "red"

    def test_later_directives_overwrite_earlier_keys(self):
        d = parse_erd(
            'entity {color: "red", label: "X"}\n'
            "[e]\n"
            'entity {color: "green", bgcolor: "#fff"}\n'
        )
        opts = d.entities[0].options
        assert (opts.color, opts.bgcolor, opts.label) == ("green", "#fff", "X")

    def test_entity_directive_does_not_touch_header_group(self):
        d = parse_erd('entity {color: "red"}\n[e]\n')
        assert d.entities[0].header_options.color is None

    def test_header_directive(self):
        d = parse_erd(
            'header {size: "20", border: "2"}\n'
            '[a] {size: "12"}\n'
            "[b]\n"
        )
        a, b = d.entities
        assert (a.header_options.size, a.header_options.border) == (12, 2)
        assert (b.header_options.size, b.header_options.border) == (20, 2)

    def test_local_options_do_not_leak_between_entities(self):
        d = parse_erd('[a] {color: "red"}\n[b]\n')
        assert d.entities[1].options.color is None

    def test_relationship_directive(self):
        d = parse_erd(
            'relationship {color: "blue", size: "2"}\n'
            'a 1--1 b {color: "red"}\n'
            "a 1--* c\n"
        )
        first, second = d.relationships
        assert (first.options.color, first.options.size) == ("red", 2)
        assert (second.options.color, second.options.size) == ("blue", 2)

    def test_title_directive(self):
        d = parse_erd('title {label: "Schema"}\ntitle {size: "20", color: "gray"}\n')
        assert d.title.label == "Schema"
        assert d.title.size == 20
        assert d.title.color == "gray"

    def test_title_defaults(self):
        d = parse_erd("[a]")
        assert d.title.label is None
        assert d.title.size == 30

    def test_attributes_are_not_affected_by_entity_directive(self):
        d = parse_erd('entity {color: "red"}\n[e]\nid\n')
        assert d.entities[0].attributes[0].options.color is None

    @pytest.mark.parametrize(
        "directive, key, group",
        [
            ('entity {border: "2"}', "border", "entity"),
            ('header {label: "x"}', "label", "header"),
            ('relationship {bgcolor: "red"}', "bgcolor", "relationship"),
            ('title {bogus: "x"}', "bogus", "title"),
        ],
    )
    def test_directives_reject_keys_outside_their_group(self, directive, key, group):
        with pytest.raises(ErdOptionError) as excinfo:
            parse_erd(directive + "\n[a]\n")
        assert excinfo.value.key == key
        assert excinfo.value.group == group

    def test_bad_directive_value_fails_without_receivers(self):
        with pytest.raises(ErdOptionError) as excinfo:
            parse_erd('relationship {size: "huge"}')
        assert excinfo.value.value == "huge"

    def test_bad_directive_value_fails_even_when_overridden(self):
        with pytest.raises(ErdError):
            parse_erd('header {size: "x"}\n[a] {size: "10"}\n')


# ============================================================================
# Example documents
# ============================================================================


class TestFixtures:
    def test_simple(self):
        d = parse_erd(read_fixture("simple.er"))
        assert len(d.entities) == 2
        assert len(d.relationships) == 1

        person, place = d.entities
        assert person.name == "Person"
        assert [a.name for a in person.attributes] == [
            "name",
            "height",
            "weight",
            "birth date",
            "birth_place_id",
        ]
        assert person.attributes[0].is_primary_key
        assert person.attributes[4].is_foreign_key
        assert place.name == "Birth Place"
        assert [a.name for a in place.attributes] == ["id", "birth city", "birth state", "birth country"]

        rel = d.relationships[0]
        assert (rel.entity1, rel.entity2, rel.card1, rel.card2) == ("Person", "Birth Place", "zero-many", "one")

    def test_nfldb(self):
        d = parse_erd(read_fixture("nfldb.er"))
        assert len(d.entities) == 7
        assert len(d.relationships) == 13
        assert d.title.label == "nfldb Entity-Relationship diagram (condensed)"
        assert d.title.size == 20

        by_name = {e.name: e for e in d.entities}
        assert len(by_name["game"].attributes) == 10
        assert by_name["game"].options.bgcolor == "#ececfc"
        assert by_name["meta"].options.bgcolor == "#fcecec"

        play_player = by_name["play_player"]
        assert all(a.is_primary_key and a.is_foreign_key for a in play_player.attributes[:4])
        assert play_player.header_options.size == 14
        assert play_player.header_options.cellpadding == 6
        assert by_name["team"].header_options.size == 18

        assert all(r.options.color == "gray40" for r in d.relationships)
        assert [r.options.label for r in d.relationships[1:3]] == ["home", "away"]
