from __future__ import annotations

from .options import TitleOptions
from .styles import (
    DEFAULTS,
    ENTITY_BGCOLOR,
    FONT_SIZES,
    INDENT,
    TABLE_SPACING,
    TITLE_PLACEMENT,
)
from .types import (
    CARDINALITY_LABELS,
    Attribute,
    Diagram,
    Entity,
    Relation,
    RenderOptions,
)

# ============================================================================
# DOT renderer
#
# Serializes a resolved Diagram to Graphviz DOT (undirected graph).
#
# Output order:
#   1. graph / node / edge default attribute blocks
#   2. one node per entity, labelled with an HTML-like table
#   3. one edge per relationship, with cardinalities as head/tail labels
#
# Entity tables: a bold header row with the entity name, then one row per
# attribute. Primary keys are underlined, foreign keys italic.
# ============================================================================

Attrs = list[tuple[str, str]]


def render_dot(diagram: Diagram, options: RenderOptions | None = None) -> str:
    """Render a resolved diagram as DOT text.

    Args:
        diagram: The diagram returned by parse_erd.
        options: Graph-wide settings; unset fields fall back to styles.DEFAULTS.
    """
    if options is None:
        options = RenderOptions()

    parts: list[str] = ["graph {"]
    parts.append(_attribute_block("graph", _graph_attributes(diagram.title, options)))
    parts.append(
        _attribute_block(
            "node",
            [
                ("label", '"\\N"'),
                ("shape", _quote("plaintext")),
                ("fontname", _quote(_setting(options, "font"))),
            ],
        )
    )
    parts.append(
        _attribute_block(
            "edge",
            [
                ("color", _quote(_setting(options, "edge_color"))),
                ("minlen", _quote(str(_setting(options, "edge_minlen")))),
                ("style", _quote(_setting(options, "edge_style"))),
            ],
        )
    )

    for entity in diagram.entities:
        parts.append("")
        parts.append(_render_entity(entity))

    if diagram.relationships:
        parts.append("")
    for rel in diagram.relationships:
        parts.append(_render_relationship(rel))

    parts.append("}")
    return "\n".join(parts) + "\n"


def _setting(options: RenderOptions, name: str):
    value = getattr(options, name)
    return DEFAULTS[name] if value is None else value


# ============================================================================
# Attribute blocks
# ============================================================================


def _graph_attributes(title: TitleOptions, options: RenderOptions) -> Attrs:
    attrs: Attrs = [
        ("rankdir", _quote(_setting(options, "direction"))),
        ("splines", _quote(_setting(options, "splines"))),
    ]
    if title.label is not None:
        attrs.append(("labeljust", _quote(TITLE_PLACEMENT["labeljust"])))
        attrs.append(("labelloc", _quote(TITLE_PLACEMENT["labelloc"])))
        label = _font(
            _escape_html(title.label),
            face=title.font,
            size=title.size,
            color=title.color,
        )
        attrs.append(("label", f"<{label}>"))
    return attrs


def _attribute_block(name: str, attrs: Attrs) -> str:
    lines = [f"{INDENT}{name} ["]
    for key, value in attrs:
        lines.append(f"{INDENT * 2}{key}={value},")
    lines.append(f"{INDENT}];")
    return "\n".join(lines)


# ============================================================================
# Entity nodes
# ============================================================================


def _render_entity(entity: Entity) -> str:
    """Render an entity node with its header row and attribute rows."""
    header = entity.header_options
    opts = entity.options

    table_attrs = _html_attrs(
        BGCOLOR=opts.bgcolor or ENTITY_BGCOLOR,
        BORDER=_pick(header.border, TABLE_SPACING["border"]),
        CELLBORDER=_pick(header.cellborder, TABLE_SPACING["cellborder"]),
        CELLPADDING=_pick(header.cellpadding, TABLE_SPACING["cellpadding"]),
        CELLSPACING=_pick(header.cellspacing, TABLE_SPACING["cellspacing"]),
        COLOR=opts.bordercolor,
    )

    title = opts.label if opts.label is not None else entity.name
    header_size = header.size if header.size is not None else opts.size
    header_text = _font(
        f"<B>{_escape_html(title)}</B>",
        face=header.font,
        size=_pick(header_size, FONT_SIZES["header"]),
        color=header.color,
    )

    rows = [f"<TR><TD{_html_attrs(BGCOLOR=header.bgcolor)}>{header_text}</TD></TR>"]
    rows.extend(_render_attribute(attr) for attr in entity.attributes)

    table = [f"<TABLE{table_attrs}>"]
    table.extend(f"{INDENT}{row}" for row in rows)
    table.append("</TABLE>")

    # Entity face and color apply to the whole table
    if opts.font is not None or opts.color is not None:
        open_tag = _font_tag(face=opts.font, color=opts.color)
        table = [open_tag] + [f"{INDENT}{line}" for line in table] + ["</FONT>"]

    lines = [f"{INDENT}{_quote(entity.name)} [label=<"]
    lines.extend(f"{INDENT * 2}{line}" for line in table)
    lines.append(f"{INDENT}>];")
    return "\n".join(lines)


def _render_attribute(attr: Attribute) -> str:
    """Render one attribute row. PK underlined, FK italic."""
    opts = attr.options
    text = _escape_html(attr.name)
    if attr.is_primary_key:
        text = f"<U>{text}</U>"
    if attr.is_foreign_key:
        text = f"<I>{text}</I>"
    if opts.label is not None:
        text = f"{text} [{_escape_html(opts.label)}]"
    text = _font(text, face=opts.font, color=opts.color)

    cell_attrs = _html_attrs(
        ALIGN=opts.align,
        BGCOLOR=opts.bgcolor,
        BORDER=opts.border,
        COLOR=opts.bordercolor,
    )
    return f"<TR><TD{cell_attrs}>{text}</TD></TR>"


# ============================================================================
# Relationship edges
# ============================================================================


def _render_relationship(rel: Relation) -> str:
    """Render an edge. The head is entity2, the tail entity1."""
    opts = rel.options
    attrs: Attrs = [
        ("headlabel", _quote(CARDINALITY_LABELS[rel.card2])),
        ("taillabel", _quote(CARDINALITY_LABELS[rel.card1])),
    ]
    if opts.label is not None:
        attrs.append(("label", _quote(opts.label)))
    if opts.color is not None:
        attrs.append(("color", _quote(opts.color)))
    if opts.size is not None:
        attrs.append(("penwidth", _quote(str(opts.size))))
    if opts.font is not None:
        attrs.append(("fontname", _quote(opts.font)))

    rendered = ", ".join(f"{key}={value}" for key, value in attrs)
    return f"{INDENT}{_quote(rel.entity1)} -- {_quote(rel.entity2)} [{rendered}];"


# ============================================================================
# Helpers
# ============================================================================


def _pick(value: int | None, fallback: int) -> int:
    return fallback if value is None else value


def _font_tag(
    face: str | None = None,
    size: int | None = None,
    color: str | None = None,
) -> str:
    return f"<FONT{_html_attrs(**{'FACE': face, 'POINT-SIZE': size, 'COLOR': color})}>"


def _font(
    text: str,
    face: str | None = None,
    size: int | None = None,
    color: str | None = None,
) -> str:
    """Wrap text in a <FONT> element, or return it as is with nothing to set."""
    if face is None and size is None and color is None:
        return text
    return f"{_font_tag(face, size, color)}{text}</FONT>"


def _html_attrs(**attrs: str | int | None) -> str:
    """Format HTML-like label attributes, skipping unset ones."""
    return "".join(
        f' {name}="{_escape_html(str(value))}"'
        for name, value in attrs.items()
        if value is not None
    )


def _quote(text: str) -> str:
    """Quote a DOT string."""
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _escape_html(text: str) -> str:
    """Escape special characters in HTML-like label text."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )
