"""Token framework constants."""

from __future__ import annotations

TOKEN_CATEGORIES: tuple[str, ...] = (
    "zIndex",
    "opacity",
    "colors",
    "fonts",
    "fontSizes",
    "fontWeights",
    "lineHeights",
    "letterSpacings",
    "sizes",
    "shadows",
    "spacing",
    "radii",
    "borders",
    "durations",
    "easings",
    "animations",
    "blurs",
    "gradients",
    "assets",
    "borderWidths",
    "properties",
    "breakpoints",
    "borderStyles",
    "aspectRatios",
)

DEFINITION_KEYS: tuple[str, ...] = (
    "tokens",
    "semantic_tokens",
)

TOKEN_SCHEMA_KEYS: tuple[str, ...] = (
    "value",
    "description",
)

DEFAULT_KEY = "DEFAULT"
BASE_CONDITION = "base"
COLOR_PALETTE_KEY = "colorPalette"
CSS_VAR_MARKER = "--"
