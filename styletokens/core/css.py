"""CSS custom property emission for token dictionaries.

Produces declaration mappings (``--name -> value``) and renders them into
rule blocks: the ``:root`` block for base values, one block per condition
for semantic tokens, and color palette scopes that wire the shared
``--colorPalette-*`` variables to a concrete family.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from styletokens.core.constants import BASE_CONDITION, COLOR_PALETTE_KEY
from styletokens.core.dictionary import TokenDictionary


def css_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(css_value(item) for item in value)
    return str(value)


def get_token_css(dictionary: TokenDictionary) -> dict[str, str]:
    """Return base declarations for every registered token."""
    declarations: dict[str, str] = {}
    for token in dictionary.all_tokens:
        css_var = token.extensions.css_var or dictionary.format_css_var(token.path)
        declarations[css_var.var] = css_value(token.value)
    return declarations


def get_condition_css(dictionary: TokenDictionary) -> dict[str, dict[str, str]]:
    """Return non-base condition declarations grouped by condition name."""
    grouped: dict[str, dict[str, str]] = {}
    for token in dictionary.all_tokens:
        conditions = token.extensions.conditions
        if not conditions:
            continue
        css_var = token.extensions.css_var or dictionary.format_css_var(token.path)
        for condition, value in conditions.items():
            if condition == BASE_CONDITION:
                continue
            grouped.setdefault(condition, {})[css_var.var] = css_value(value)
    return grouped


def get_color_palette_css(dictionary: TokenDictionary, palette: str = "") -> dict[str, str]:
    """Point each shared ``colorPalette`` variable at the matching variant of ``palette``.

    Without a palette every variable points at the first family that defines
    its variant, so the shared variables are always declared.
    """
    shared = dictionary.get_color_palette(COLOR_PALETTE_KEY)
    if palette:
        sources = [dictionary.get_color_palette(palette)]
    else:
        sources = [
            variants for key, variants in dictionary.color_palette_map.items() if key != COLOR_PALETTE_KEY
        ]
    declarations: dict[str, str] = {}
    for variants in sources:
        for variant, ref in variants.items():
            if variant not in shared:
                continue
            declarations.setdefault(dictionary.format_css_var((COLOR_PALETTE_KEY, variant)).var, ref)
    return declarations


def render_css_rule(selector: str, declarations: Mapping[str, str], indent: int = 2) -> str:
    """
    Render declarations as a CSS rule block.

    Args:
        selector: Rule selector, e.g. ``:root``
        declarations: Custom property name -> value mapping
        indent: Number of spaces for indentation

    Returns:
        CSS string for the rule
    """
    prefix = " " * indent
    lines = [f"{selector} {{"]
    for name, value in declarations.items():
        lines.append(f"{prefix}{name}: {value};")
    lines.append("}")
    return "\n".join(lines)


def condition_selector(condition: str, selectors: Mapping[str, str] | None = None) -> str:
    """
    Get the CSS selector for a condition name.

    Args:
        condition: Condition name (e.g., "_dark")
        selectors: Explicit condition -> selector overrides

    Returns:
        CSS selector string
    """
    if selectors and condition in selectors:
        return selectors[condition]
    return f'[data-theme="{condition.lstrip("_")}"]'


def palette_selector(palette: str) -> str:
    return f'[data-color-palette="{palette}"]'


def generate_stylesheet(
    dictionary: TokenDictionary,
    *,
    root: str = ":root",
    condition_selectors: Mapping[str, str] | None = None,
    default_palette: str = "",
    palette_scopes: Iterable[str] = (),
    title: str = "",
) -> str:
    """
    Generate a stylesheet from a built dictionary.

    Args:
        dictionary: Frozen token dictionary
        root: Selector for the base declarations
        condition_selectors: Condition name -> selector overrides
        default_palette: Palette wired into the root block, defaults to the
            first family defining each variant
        palette_scopes: Palettes that get their own scoping rule
        title: Optional header comment

    Returns:
        CSS string with the root rule, condition rules and palette scopes
    """
    blocks: list[str] = []
    if title:
        blocks.append(f"/* {title} */\n/* Auto-generated - do not edit */")

    root_declarations = get_token_css(dictionary)
    root_declarations.update(get_color_palette_css(dictionary, default_palette))
    blocks.append(render_css_rule(root, root_declarations))

    for condition, declarations in get_condition_css(dictionary).items():
        blocks.append(render_css_rule(condition_selector(condition, condition_selectors), declarations))

    for palette in palette_scopes:
        declarations = get_color_palette_css(dictionary, palette)
        if declarations:
            blocks.append(render_css_rule(palette_selector(palette), declarations))

    return "\n\n".join(blocks) + "\n"
