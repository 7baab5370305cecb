"""Color palette extraction."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

from styletokens.core.constants import COLOR_PALETTE_KEY, DEFAULT_KEY
from styletokens.core.formatter import SanitizePolicy, format_css_var
from styletokens.core.models import ColorPaletteExtension, is_token_definition
from styletokens.core.walker import walk_object


def palette_variant(path: Sequence[str]) -> str | None:
    """Return the variant label of a path below ``colors``, if it has one.

    ``("red", "500")`` gives ``"500"``; single-level colors and ``DEFAULT``
    leaves have no variant.
    """
    if len(path) <= 1 or path[-1] == DEFAULT_KEY:
        return None
    return str(path[-1])


def shared_color_palette(
    variants: Iterable[str],
    prefix: str = "",
    *,
    policy: SanitizePolicy = "escape",
) -> dict[str, dict[str, str]]:
    """Map each distinct variant label to its ``colorPalette`` variable reference."""
    labels = dict.fromkeys(variants)
    if not labels:
        return {}
    return {
        COLOR_PALETTE_KEY: {
            label: format_css_var((COLOR_PALETTE_KEY, label), prefix, policy=policy).ref
            for label in labels
        }
    }


def create_color_palettes_css_vars(
    tokens: Mapping[str, Any],
    prefix: str = "",
    *,
    policy: SanitizePolicy = "escape",
) -> dict[str, dict[str, str]]:
    """Collect every variant label used under ``colors`` into one shared palette.

    ``{"red": {"500": ...}, "blue": {"500": ..., "600": ...}, "black": ...}``
    gives ``{"colorPalette": {"500": ref, "600": ref}}``: labels are shared
    across families and single-level colors never contribute.
    """
    labels: list[str] = []

    def collect(value: Any, path: list[str]) -> None:
        label = palette_variant(path)
        if label is not None:
            labels.append(label)

    walk_object(tokens.get("colors") or {}, collect, stop=is_token_definition)
    return shared_color_palette(labels, prefix, policy=policy)


def color_palette_extension(path: tuple[str, ...]) -> ColorPaletteExtension | None:
    """Describe the palette membership of a color token path, if any."""
    palette_path = path[1:-1]
    if not palette_path:
        return None
    roots = tuple(palette_path[: index + 1] for index in range(len(palette_path)))
    keys = tuple(path[1 + len(root):] for root in roots)
    return ColorPaletteExtension(value=".".join(palette_path), roots=roots, keys=keys)
