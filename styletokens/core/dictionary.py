"""Token dictionary: registration, indexing and lookup."""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from styletokens.core.constants import BASE_CONDITION, COLOR_PALETTE_KEY, DEFAULT_KEY, TOKEN_CATEGORIES
from styletokens.core.formatter import TokenCssVar, TokenFormatError, TokenFormatter
from styletokens.core.models import Token, TokenEnforcePhase, is_token_definition
from styletokens.core.palette import color_palette_extension, palette_variant, shared_color_palette
from styletokens.core.pipeline import PipelineStep, TransformPipeline
from styletokens.core.walker import build_tree, iter_leaves
from styletokens.errors import ErrorCode, TokenDictionaryError, TokenPipelineError

logger = logging.getLogger("styletokens.dictionary")

_REFERENCE_RE = re.compile(r"^\{\s*([^{}\s]+)\s*\}$")


class TokenDictionary:
    """Owns a token set and the indexes derived from it.

    Lifecycle: tokens are ingested and the "pre" steps run with only
    ``all_tokens``/``token_map`` available, then the derived indexes are
    built, then the "post" steps run. After :meth:`build` the dictionary is
    frozen; :meth:`run_pipeline` is the only way to re-index it.
    """

    def __init__(
        self,
        tokens: Mapping[str, Any] | None = None,
        semantic_tokens: Mapping[str, Any] | None = None,
        *,
        prefix: str = "",
        formatter: TokenFormatter | None = None,
        pipeline: TransformPipeline | None = None,
    ) -> None:
        self._formatter = formatter or TokenFormatter(prefix=prefix)
        self._source_tokens = dict(tokens or {})
        self._source_semantic_tokens = dict(semantic_tokens or {})
        self._pipeline = pipeline or TransformPipeline()

        self._all_tokens: list[Token] = []
        self._token_map: dict[str, Token] = {}
        self._flat_map: dict[str, str] = {}
        self._css_var_map: dict[str, dict[str, str]] = {}
        self._category_map: dict[str, dict[str, Token]] = {}
        self._color_palette_map: dict[str, dict[str, str]] = {}
        self._shared_palettes: dict[str, dict[str, str]] = {}

        self._ingested = False
        self._indexed = False
        self._frozen = False
        self._phase: TokenEnforcePhase | None = None
        self._registrations: list[tuple[str, TokenEnforcePhase | None]] = []
        self._rejected: list[str] = []

    # -- configuration --

    @property
    def prefix(self) -> str:
        return self._formatter.prefix

    @property
    def formatter(self) -> TokenFormatter:
        return self._formatter

    @property
    def pipeline(self) -> TransformPipeline:
        return self._pipeline

    def use(self, *steps: PipelineStep) -> TokenDictionary:
        self._ensure_mutable(steps[0].name if steps else "")
        self._pipeline.use(*steps)
        return self

    def format_token_name(self, path: Sequence[str]) -> str:
        return self._formatter.format_token_name(path)

    def format_css_var(self, path: Sequence[str], fallback: str | None = None) -> TokenCssVar:
        return self._formatter.format_css_var(path, fallback)

    # -- state --

    @property
    def all_tokens(self) -> list[Token]:
        return list(self._all_tokens)

    @property
    def token_map(self) -> Mapping[str, Token]:
        return MappingProxyType(self._token_map)

    @property
    def flat_map(self) -> Mapping[str, str]:
        self._require_indexes("flat_map")
        return MappingProxyType(self._flat_map)

    @property
    def css_var_map(self) -> Mapping[str, dict[str, str]]:
        self._require_indexes("css_var_map")
        return MappingProxyType(self._css_var_map)

    @property
    def category_map(self) -> Mapping[str, dict[str, Token]]:
        self._require_indexes("category_map")
        return MappingProxyType(self._category_map)

    @property
    def color_palette_map(self) -> Mapping[str, dict[str, str]]:
        self._require_indexes("color_palette_map")
        return MappingProxyType(self._color_palette_map)

    @property
    def is_indexed(self) -> bool:
        return self._indexed

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    @property
    def phase(self) -> TokenEnforcePhase | None:
        return self._phase

    @property
    def registrations(self) -> list[tuple[str, TokenEnforcePhase | None]]:
        return list(self._registrations)

    @property
    def rejected(self) -> list[str]:
        return list(self._rejected)

    # -- building --

    def build(self) -> TokenDictionary:
        """Ingest the source trees, run both phases and freeze."""
        if self._frozen:
            return self
        if not self._ingested:
            self._ingest()
        self.run_pipeline()
        return self

    def run_pipeline(self) -> None:
        """Run pre steps, build indexes, run post steps, then freeze."""
        self._frozen = False
        self._clear_indexes()
        self._shared_palettes = {}
        try:
            self._phase = "pre"
            for step in self._pipeline.pre:
                self._run_step(step)
            self._build_indexes()
            self._phase = "post"
            for step in self._pipeline.post:
                self._run_step(step)
                self._build_indexes()
        finally:
            self._phase = None
        self._frozen = True
        logger.info(
            "built token dictionary: %d tokens, %d categories, %d rejected",
            len(self._all_tokens),
            len(self._category_map),
            len(self._rejected),
        )

    def _run_step(self, step: PipelineStep) -> None:
        try:
            step.apply(self)
        except Exception as exc:
            logger.error("token step %s failed during %s phase: %s", step.name, self._phase, exc)
            raise TokenPipelineError(
                ErrorCode.PIPELINE_FAILED,
                message=f"Token step {step.name!r} failed during the {self._phase} phase: {exc}",
                details={"step": step.name, "phase": self._phase},
            ) from exc

    def _ingest(self) -> None:
        for category, tree in self._source_tokens.items():
            self._register_tree(str(category), tree, semantic=False)
        for category, tree in self._source_semantic_tokens.items():
            self._register_tree(str(category), tree, semantic=True)
        self._ingested = True

    def _register_tree(self, category: str, tree: Any, *, semantic: bool) -> None:
        for path, raw in iter_leaves(build_tree(tree, stop=is_token_definition)):
            token = self._create_token([category, *path], raw, semantic=semantic)
            if token is not None:
                self.register_token(token)

    def _create_token(self, path: list[str], raw: Any, *, semantic: bool) -> Token | None:
        value = raw
        description = ""
        if is_token_definition(raw):
            value = raw["value"]
            description = str(raw.get("description") or "")

        extensions: dict[str, Any] = {"original_path": tuple(path)}
        if len(path) > 2 and path[-1] == DEFAULT_KEY:
            path = path[:-1]
            extensions["default"] = True

        original_value = value
        if semantic and isinstance(value, Mapping):
            conditions = {str(key): item for key, item in value.items()}
            if BASE_CONDITION not in conditions:
                self._reject(".".join(path), f"conditional value has no {BASE_CONDITION!r} entry")
                return None
            value = conditions[BASE_CONDITION]
            extensions["conditions"] = conditions
            extensions["condition"] = BASE_CONDITION

        return Token.create(
            path,
            value,
            original_value=original_value,
            description=description,
            **extensions,
        )

    # -- registration --

    def register_token(self, token: Token, phase: TokenEnforcePhase | None = None) -> bool:
        """Insert or replace ``token`` by name.

        Returns False, without raising, when the token cannot be registered.
        """
        self._ensure_mutable(token.name)
        token.path = tuple(str(segment) for segment in token.path)
        problem = self._validate(token)
        if problem:
            self._reject(token.name or "<unnamed>", problem)
            return False

        token.extensions.category = token.path[0]
        token.extensions.prop = self._formatter.format_token_name(token.path[1:])
        if not token.extensions.original_path:
            token.extensions.original_path = token.path

        previous = self._token_map.get(token.name)
        if previous is None:
            self._all_tokens.append(token)
        elif previous is not token:
            position = next(i for i, item in enumerate(self._all_tokens) if item is previous)
            self._all_tokens[position] = token
            logger.debug("token %s replaced an earlier registration", token.name)
        self._token_map[token.name] = token
        self._registrations.append((token.name, phase or self._phase))

        if self._indexed:
            if previous is not None:
                self._unindex_token(previous)
            self._index_token(token)
            self._refresh_shared_palette()
        return True

    def rename_token(self, token: Token, name: str) -> None:
        """Re-key ``token`` under ``name``.

        A different token already registered as ``name`` is dropped, so the
        renamed token wins.
        """
        self._ensure_mutable(name)
        if token.name == name:
            return
        if self._indexed:
            self._unindex_token(token)
        if self._token_map.get(token.name) is token:
            del self._token_map[token.name]
        token.name = name

        previous = self._token_map.get(name)
        if previous is not None and previous is not token:
            self._all_tokens.remove(previous)
            if self._indexed:
                self._unindex_token(previous)
            logger.debug("renamed token %s replaced an earlier registration", name)
        self._token_map[name] = token
        if self._indexed:
            self._index_token(token)
            self._refresh_shared_palette()

    def _validate(self, token: Token) -> str | None:
        if not token.path:
            return "token path is empty"
        if not token.name:
            return "token name is empty"
        if any(not segment for segment in token.path):
            return "token path contains an empty segment"
        if token.path[0] not in TOKEN_CATEGORIES:
            return f"unknown token category {token.path[0]!r}"
        if token.value is None or isinstance(token.value, bool):
            return f"unsupported token value {token.value!r}"
        try:
            self._formatter.format_css_var(token.path)
        except TokenFormatError as exc:
            return str(exc)
        return None

    def _reject(self, name: str, reason: str) -> None:
        logger.warning("rejected token %s: %s", name, reason)
        self._rejected.append(f"{name}: {reason}")

    def _ensure_mutable(self, name: str) -> None:
        if self._frozen:
            raise TokenDictionaryError(
                ErrorCode.DICTIONARY_FROZEN,
                details={"token": name} if name else {},
            )

    # -- indexes --

    def _require_indexes(self, index: str) -> None:
        if not self._indexed:
            raise TokenDictionaryError(
                ErrorCode.DICTIONARY_NOT_INDEXED,
                message=f"{index} is only available after the index stage",
                details={"phase": self._phase},
            )

    def _clear_indexes(self) -> None:
        self._indexed = False
        self._flat_map = {}
        self._css_var_map = {}
        self._category_map = {}
        self._color_palette_map = {}

    def _build_indexes(self) -> None:
        by_name: dict[str, Token] = {}
        for token in self._all_tokens:
            if token.name in by_name:
                logger.debug("token name %s registered twice; keeping the last", token.name)
            by_name[token.name] = token
        self._all_tokens = list(by_name.values())
        self._token_map = by_name

        self._clear_indexes()
        for token in self._all_tokens:
            self._index_token(token)
        for key, variants in self._shared_palettes.items():
            self._color_palette_map.setdefault(key, {}).update(variants)
        self._refresh_shared_palette()
        self._indexed = True

    def _index_token(self, token: Token) -> None:
        css_var = self._formatter.format_css_var(token.path)
        token.extensions.css_var = css_var
        category = token.category
        self._flat_map[token.name] = css_var.var
        self._css_var_map.setdefault(category, {})[token.name] = css_var.var
        self._category_map.setdefault(category, {})[token.name] = token

        if category == "colors" and len(token.path) > 2 and not token.extensions.virtual:
            token.extensions.color_palette = color_palette_extension(token.path)
        palette = token.extensions.color_palette
        if palette is not None:
            for root, key in zip(palette.roots, palette.keys):
                variants = self._color_palette_map.setdefault(".".join(root), {})
                variants[".".join(key)] = css_var.ref

    def _unindex_token(self, token: Token) -> None:
        category = token.category
        self._flat_map.pop(token.name, None)
        self._css_var_map.get(category, {}).pop(token.name, None)
        self._category_map.get(category, {}).pop(token.name, None)

        palette = token.extensions.color_palette
        css_var = token.extensions.css_var
        if palette is None or css_var is None:
            return
        for root, key in zip(palette.roots, palette.keys):
            root_name = ".".join(root)
            variants = self._color_palette_map.get(root_name)
            if variants is None:
                continue
            if variants.get(".".join(key)) == css_var.ref:
                del variants[".".join(key)]
            if not variants:
                del self._color_palette_map[root_name]

    def _refresh_shared_palette(self) -> None:
        labels = [
            palette_variant(token.extensions.original_path[1:])
            for token in self._category_map.get("colors", {}).values()
            if not token.extensions.virtual
        ]
        shared = shared_color_palette(
            [label for label in labels if label is not None],
            self._formatter.prefix,
            policy=self._formatter.policy,
        ).get(COLOR_PALETTE_KEY, {})
        shared.update(self._shared_palettes.get(COLOR_PALETTE_KEY, {}))
        if shared:
            self._color_palette_map[COLOR_PALETTE_KEY] = shared
        else:
            self._color_palette_map.pop(COLOR_PALETTE_KEY, None)

    def register_color_palette(self, key: str, variants: Mapping[str, str]) -> None:
        """Record a palette of variant name -> CSS var reference under ``key``."""
        self._ensure_mutable(key)
        self._shared_palettes[key] = dict(variants)
        if self._indexed:
            self._color_palette_map.setdefault(key, {}).update(variants)
            self._refresh_shared_palette()

    # -- lookup --

    def get_by_name(self, name: str) -> Token | None:
        return self._token_map.get(name)

    def get_var(self, value: str, fallback: str | None = None) -> str | None:
        """Resolve a dotted name or ``{dotted.name}`` to a ``var(...)`` reference.

        Unknown names resolve to a reference that falls back to ``fallback``
        at runtime, or to None when no fallback is given.
        """
        name = _reference_name(value)
        token = self._token_map.get(name)
        if token is not None:
            return self._formatter.format_css_var(token.path, fallback).ref
        if fallback is None:
            return None
        try:
            return self._formatter.format_css_var(name.split("."), fallback).ref
        except TokenFormatError:
            return fallback

    def token(self, name: str, fallback: str | None = None) -> str | None:
        return self.get_var(name, fallback)

    def get_category_values(self, category: str) -> dict[str, Any]:
        tokens = self.category_map.get(category, {})
        return {name: token.value for name, token in tokens.items()}

    def get_color_palette(self, key: str) -> dict[str, str]:
        return dict(self.color_palette_map.get(key, {}))


def _reference_name(value: str) -> str:
    text = str(value).strip()
    match = _REFERENCE_RE.match(text)
    if match:
        return match.group(1)
    return text
