"""Factory helpers for building token dictionaries."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping

from styletokens.core.dictionary import TokenDictionary
from styletokens.core.formatter import SanitizePolicy, TokenFormatter
from styletokens.core.pipeline import PipelineStep, TransformPipeline
from styletokens.core.transforms import (
    add_negative_tokens,
    resolve_references,
    transform_borders,
    transform_easings,
    transform_fonts,
    transform_shadows,
)

if TYPE_CHECKING:
    from styletokens.config.settings import TokenSettings

DEFAULT_STEPS: tuple[PipelineStep, ...] = (
    transform_shadows,
    transform_easings,
    transform_fonts,
    transform_borders,
    add_negative_tokens,
    resolve_references,
)


def default_pipeline(extra_steps: Iterable[PipelineStep] = ()) -> TransformPipeline:
    """Built-in steps followed by ``extra_steps``, each within its own phase."""
    return TransformPipeline([*DEFAULT_STEPS, *extra_steps])


def create_token_dictionary(
    tokens: Mapping[str, Any],
    semantic_tokens: Mapping[str, Any] | None = None,
    *,
    prefix: str = "",
    policy: SanitizePolicy = "escape",
    steps: Iterable[PipelineStep] = (),
    include_defaults: bool = True,
    settings: TokenSettings | None = None,
) -> TokenDictionary:
    """Build and freeze a dictionary for one theme configuration."""
    if settings is not None:
        prefix = settings.prefix
        policy = settings.sanitize_policy
    pipeline = default_pipeline(steps) if include_defaults else TransformPipeline(steps)
    dictionary = TokenDictionary(
        tokens,
        semantic_tokens,
        formatter=TokenFormatter(prefix=prefix, policy=policy),
        pipeline=pipeline,
    )
    return dictionary.build()
