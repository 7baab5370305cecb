"""Built-in token middlewares and transformers."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any, Mapping

from styletokens.core.models import Token
from styletokens.core.pipeline import middleware, transformer
from styletokens.core.walker import build_tree, iter_leaves

if TYPE_CHECKING:
    from styletokens.core.dictionary import TokenDictionary

logger = logging.getLogger("styletokens.transforms")

_REFERENCE_IN_VALUE_RE = re.compile(r"\{\s*([^{}\s]+)\s*\}")
_ZERO_RE = re.compile(r"^-?0+(?:\.0+)?(?:[a-z%]+)?$", re.IGNORECASE)

_SHADOW_KEYS: tuple[str, ...] = ("offsetX", "offsetY", "blur", "spread", "color")
_BORDER_KEYS: tuple[str, ...] = ("width", "style", "color")


def _in_category(*categories: str):
    def match(token: Token) -> bool:
        return token.category in categories

    return match


def _shadow(value: Any) -> Any:
    if isinstance(value, Mapping):
        parts = [str(value[key]) for key in _SHADOW_KEYS if value.get(key) is not None]
        if value.get("inset"):
            parts.insert(0, "inset")
        return " ".join(parts)
    if isinstance(value, (list, tuple)):
        return ", ".join(str(_shadow(item)) for item in value)
    return value


@transformer("value", match=_in_category("shadows"))
def transform_shadows(token: Token, dictionary: TokenDictionary) -> Any:
    return _shadow(token.value)


@transformer("value", match=_in_category("easings"))
def transform_easings(token: Token, dictionary: TokenDictionary) -> Any:
    value = token.value
    if isinstance(value, (list, tuple)) and len(value) == 4:
        return f"cubic-bezier({', '.join(str(item) for item in value)})"
    return value


@transformer("value", match=_in_category("fonts"))
def transform_fonts(token: Token, dictionary: TokenDictionary) -> Any:
    value = token.value
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return value


@transformer("value", match=_in_category("borders"))
def transform_borders(token: Token, dictionary: TokenDictionary) -> Any:
    value = token.value
    if isinstance(value, Mapping):
        return " ".join(str(value[key]) for key in _BORDER_KEYS if value.get(key) is not None)
    return value


def _is_zero(value: Any) -> bool:
    if isinstance(value, (int, float)):
        return value == 0
    return bool(_ZERO_RE.match(str(value).strip()))


@middleware("pre")
def add_negative_tokens(dictionary: TokenDictionary) -> None:
    """Register ``spacing.-4`` style negatives for every non-zero spacing token."""
    for token in dictionary.all_tokens:
        if token.category != "spacing" or token.extensions.negative:
            continue
        if len(token.path) < 2 or token.path[-1].startswith("-"):
            continue
        if not isinstance(token.value, (str, int, float)) or _is_zero(token.value):
            continue
        path = (*token.path[:-1], "-" + token.path[-1])
        if dictionary.get_by_name(dictionary.format_token_name(path)) is not None:
            continue
        value = f"calc({dictionary.format_css_var(token.path).ref} * -1)"
        dictionary.register_token(
            Token.create(
                path,
                value,
                description=token.description,
                negative=True,
            )
        )


def reference_names(value: Any) -> list[str]:
    """Return the dotted names referenced as ``{name}`` anywhere in ``value``."""
    names: dict[str, None] = {}
    for _, leaf in iter_leaves(build_tree(value)):
        if isinstance(leaf, str):
            for match in _REFERENCE_IN_VALUE_RE.finditer(leaf):
                names.setdefault(match.group(1), None)
    return list(names)


def _substitute(value: Any, dictionary: TokenDictionary) -> Any:
    if not isinstance(value, str):
        return value

    def replace(match: re.Match[str]) -> str:
        return dictionary.get_var(match.group(1)) or match.group(0)

    return _REFERENCE_IN_VALUE_RE.sub(replace, value)


@middleware("post")
def resolve_references(dictionary: TokenDictionary) -> None:
    """Point ``{dotted.name}`` references at the referenced token's CSS variable."""
    for token in dictionary.all_tokens:
        references: dict[str, Token] = {}
        for name in reference_names(token.original_value):
            target = dictionary.get_by_name(name)
            if target is None:
                logger.warning("token %s references unknown token %s", token.name, name)
                continue
            if target is token:
                logger.warning("token %s references itself", token.name)
                continue
            references[name] = target
        token.extensions.references = references
        token.value = _substitute(token.value, dictionary)
        if token.extensions.conditions:
            token.extensions.conditions = {
                condition: _substitute(item, dictionary)
                for condition, item in token.extensions.conditions.items()
            }
