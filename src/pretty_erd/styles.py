from __future__ import annotations

# ============================================================================
# Graph defaults -- fallbacks for unset RenderOptions fields.
# ============================================================================

DEFAULTS = {
    "direction": "LR",
    "splines": "spline",
    "font": "Helvetica",
    "edge_color": "gray50",
    "edge_style": "dashed",
    "edge_minlen": 2,
}

# Title placement: top left
TITLE_PLACEMENT = {
    "labeljust": "l",
    "labelloc": "t",
}

# ============================================================================
# Entity table fallbacks -- used when neither a local option nor a global
# directive sets the value.
# ============================================================================

# Point sizes
FONT_SIZES = {
    "header": 16,
}

# Table spacing attributes (HTML-like label <TABLE>)
TABLE_SPACING = {
    "border": 0,
    "cellborder": 1,
    "cellpadding": 4,
    "cellspacing": 0,
}

ENTITY_BGCOLOR = "#d0e0d0"

INDENT = "    "
