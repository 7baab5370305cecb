"""Token name and CSS custom property formatting."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, Sequence

from styletokens.core.constants import CSS_VAR_MARKER

SanitizePolicy = Literal["escape", "replace", "drop", "error"]
SANITIZE_POLICIES: tuple[str, ...] = ("escape", "replace", "drop", "error")

_INVALID_IDENT_CHAR_RE = re.compile(r"[^A-Za-z0-9_\-\u0080-\U0010ffff]")
_WHITESPACE_RE = re.compile(r"\s+")


class TokenFormatError(ValueError):
    """Raised when a token path cannot be formatted as a CSS identifier."""


@dataclass(frozen=True, slots=True)
class TokenCssVar:
    """A custom property declaration name and its usage expression."""

    var: str
    ref: str


def format_token_name(path: Sequence[str]) -> str:
    return ".".join(path)


def css_var_reference(var: str, fallback: str | None = None) -> str:
    if fallback is None:
        return f"var({var})"
    return f"var({var}, {fallback})"


def sanitize_segment(segment: str, policy: SanitizePolicy = "escape") -> str:
    """Make one path segment safe to use inside a custom property name."""
    if not segment:
        raise TokenFormatError("token path segments cannot be empty")
    if not _INVALID_IDENT_CHAR_RE.search(segment):
        return segment
    if policy == "error":
        raise TokenFormatError(
            f"token path segment {segment!r} contains characters invalid in a CSS identifier"
        )
    if policy == "drop":
        cleaned = _INVALID_IDENT_CHAR_RE.sub("", segment)
        if not cleaned:
            raise TokenFormatError(f"token path segment {segment!r} is empty after sanitizing")
        return cleaned
    cleaned = _WHITESPACE_RE.sub("-", segment)
    if policy == "replace":
        return _INVALID_IDENT_CHAR_RE.sub("_", cleaned)
    return _INVALID_IDENT_CHAR_RE.sub(lambda match: "\\" + match.group(0), cleaned)


def format_css_var(
    path: Sequence[str],
    prefix: str = "",
    *,
    fallback: str | None = None,
    policy: SanitizePolicy = "escape",
) -> TokenCssVar:
    """Format ``path`` as a custom property, e.g. ``--ck-colors-red-500``."""
    if policy not in SANITIZE_POLICIES:
        raise ValueError(f"unknown sanitize policy {policy!r}")
    if not path:
        raise TokenFormatError("token path cannot be empty")
    segments = [sanitize_segment(str(segment), policy) for segment in path]
    if prefix:
        segments.insert(0, sanitize_segment(prefix, policy))
    var = CSS_VAR_MARKER + "-".join(segments)
    return TokenCssVar(var=var, ref=css_var_reference(var, fallback))


@dataclass(frozen=True, slots=True)
class TokenFormatter:
    """Formats token paths with a fixed prefix and sanitize policy."""

    prefix: str = ""
    policy: SanitizePolicy = "escape"

    def __post_init__(self) -> None:
        if self.policy not in SANITIZE_POLICIES:
            joined = ", ".join(SANITIZE_POLICIES)
            raise ValueError(f"sanitize policy must be one of {joined}, got {self.policy!r}")

    def format_token_name(self, path: Sequence[str]) -> str:
        return format_token_name(path)

    def format_css_var(self, path: Sequence[str], fallback: str | None = None) -> TokenCssVar:
        return format_css_var(path, self.prefix, fallback=fallback, policy=self.policy)
