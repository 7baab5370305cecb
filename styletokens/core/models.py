"""Token framework models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Literal, Mapping, Sequence

from styletokens.core.formatter import TokenCssVar, format_token_name

TokenEnforcePhase = Literal["pre", "post"]
TokenTransformType = Literal["value", "name", "extensions"]


class TokenValidationError(ValueError):
    """Raised when a token definition tree fails validation."""


@dataclass(frozen=True, slots=True)
class ColorPaletteExtension:
    """Palette membership of a color token nested two or more levels deep.

    For ``colors.red.500`` the palette ``value`` is ``red``, ``roots`` is
    ``(("red",),)`` and ``keys`` is ``(("500",),)``. Deeper tokens such as
    ``colors.button.primary.bg`` belong to every prefix of their palette path.
    """

    value: str
    roots: tuple[tuple[str, ...], ...]
    keys: tuple[tuple[str, ...], ...]


@dataclass(slots=True)
class TokenExtensions:
    """Cross-cutting metadata attached to a token.

    ``extra`` holds middleware-specific keys with no dedicated field.
    """

    original_path: tuple[str, ...]
    category: str
    prop: str
    default: bool = False
    condition: str | None = None
    virtual: bool = False
    negative: bool = False
    conditions: dict[str, Any] | None = None
    css_var: TokenCssVar | None = None
    color_palette: ColorPaletteExtension | None = None
    references: dict[str, Token] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def update(self, values: Mapping[str, Any]) -> None:
        """Merge an extensions transformer result into this record."""
        for key, value in values.items():
            if key in _STRUCTURED_FIELDS:
                setattr(self, key, value)
            else:
                self.extra[key] = value


_STRUCTURED_FIELDS = frozenset(item.name for item in fields(TokenExtensions)) - {"extra"}


@dataclass(slots=True, eq=False)
class Token:
    """A named design value resolved from a path in the token tree."""

    name: str
    path: tuple[str, ...]
    value: Any
    original_value: Any
    extensions: TokenExtensions
    description: str = ""

    @property
    def category(self) -> str:
        return self.path[0] if self.path else ""

    @classmethod
    def create(
        cls,
        path: Sequence[str],
        value: Any,
        *,
        original_value: Any = None,
        description: str = "",
        **extensions: Any,
    ) -> Token:
        token_path = tuple(str(segment) for segment in path)
        original_path = tuple(extensions.pop("original_path", token_path))
        return cls(
            name=format_token_name(token_path),
            path=token_path,
            value=value,
            original_value=value if original_value is None else original_value,
            extensions=TokenExtensions(
                original_path=original_path,
                category=token_path[0] if token_path else "",
                prop=format_token_name(token_path[1:]),
                **extensions,
            ),
            description=description,
        )


def is_token_definition(value: Any, path: Sequence[str] | None = None) -> bool:
    """Return True for ``{value, description}`` definition records."""
    return isinstance(value, Mapping) and "value" in value
