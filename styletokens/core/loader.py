"""Token definition file parsing and validation."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from styletokens.core.constants import DEFINITION_KEYS, TOKEN_CATEGORIES, TOKEN_SCHEMA_KEYS
from styletokens.core.models import TokenValidationError, is_token_definition
from styletokens.core.walker import build_tree, iter_leaves

_MAX_DEFINITION_BYTES = 1024 * 1024
_MAX_DESC_LEN = 240


@dataclass(frozen=True, slots=True)
class TokenDefinitions:
    """Validated token and semantic token trees."""

    tokens: dict[str, Any] = field(default_factory=dict)
    semantic_tokens: dict[str, Any] = field(default_factory=dict)
    source: Path | None = None


def load_token_definitions(path: Path) -> TokenDefinitions:
    """Load and validate a YAML or JSON token definition file."""
    if not path.exists() or not path.is_file():
        raise TokenValidationError(f"Token definition path is not a file: {path}")
    content = _read_text_limited(path, max_bytes=_MAX_DEFINITION_BYTES)
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise TokenValidationError(f"Invalid YAML in {path}: {exc}") from exc
    if data is None:
        data = {}
    return parse_token_definitions(data, source=path)


def parse_token_definitions(data: object, *, source: Path | None = None) -> TokenDefinitions:
    context = str(source) if source else "<definitions>"
    if not isinstance(data, Mapping):
        raise TokenValidationError(f"{context}: expected a mapping at the top level")
    _reject_unknown_keys(data, allowed=set(DEFINITION_KEYS), context=context)

    return TokenDefinitions(
        tokens=_parse_tree(data.get("tokens"), context=f"{context}:tokens", semantic=False),
        semantic_tokens=_parse_tree(
            data.get("semantic_tokens"),
            context=f"{context}:semantic_tokens",
            semantic=True,
        ),
        source=source,
    )


def _parse_tree(data: object, *, context: str, semantic: bool) -> dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TokenValidationError(f"{context}: expected a mapping of token categories")
    _reject_unknown_keys(data, allowed=set(TOKEN_CATEGORIES), context=context)

    for path, leaf in iter_leaves(build_tree(data, stop=is_token_definition)):
        name = ".".join(path)
        if is_token_definition(leaf):
            _validate_definition(leaf, name, context=context, semantic=semantic)
        else:
            _validate_primitive(leaf, name, context=context)
    return {str(key): value for key, value in data.items()}


def _validate_definition(
    leaf: Mapping[str, Any],
    name: str,
    *,
    context: str,
    semantic: bool,
) -> None:
    _reject_unknown_keys(leaf, allowed=set(TOKEN_SCHEMA_KEYS), context=f"{context}:{name}")
    description = leaf.get("description")
    if description is not None:
        if not isinstance(description, str):
            raise TokenValidationError(f"{context}: description of {name!r} must be a string")
        if len(description) > _MAX_DESC_LEN:
            raise TokenValidationError(f"{context}: description of {name!r} exceeds max length {_MAX_DESC_LEN}")

    value = leaf["value"]
    if isinstance(value, Mapping) and semantic:
        if not value:
            raise TokenValidationError(f"{context}: token {name!r} has an empty condition record")
    for _, item in iter_leaves(build_tree(value)):
        _validate_primitive(item, name, context=context)


def _validate_primitive(value: object, name: str, *, context: str) -> None:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise TokenValidationError(
            f"{context}: token {name!r} must be a string or number, got {value!r}"
        )
    if isinstance(value, str) and not value.strip():
        raise TokenValidationError(f"{context}: token {name!r} must not be empty")


def _reject_unknown_keys(
    data: Mapping[Any, object],
    *,
    allowed: set[str],
    context: str,
) -> None:
    unknown = sorted(str(key) for key in data.keys() if str(key) not in allowed)
    if unknown:
        joined = ", ".join(unknown)
        raise TokenValidationError(f"{context}: unsupported keys found: {joined}")


def _read_text_limited(path: Path, *, max_bytes: int) -> str:
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise TokenValidationError(f"Unable to stat {path}: {exc}") from exc
    if size > max_bytes:
        raise TokenValidationError(f"{path}: file exceeds max size ({max_bytes} bytes)")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TokenValidationError(f"Unable to read {path}: {exc}") from exc
