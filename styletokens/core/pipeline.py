"""Two-stage token transform pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable, Union

from styletokens.core.models import Token, TokenEnforcePhase, TokenTransformType

if TYPE_CHECKING:
    from styletokens.core.dictionary import TokenDictionary

TOKEN_ENFORCE_PHASES: tuple[str, ...] = ("pre", "post")
TOKEN_TRANSFORM_TYPES: tuple[str, ...] = ("value", "name", "extensions")


def _check_phase(name: str, enforce: str) -> None:
    if enforce not in TOKEN_ENFORCE_PHASES:
        raise ValueError(f"step {name!r}: enforce must be 'pre' or 'post', got {enforce!r}")


@dataclass(frozen=True, slots=True)
class TokenMiddleware:
    """A step that receives the whole dictionary."""

    name: str
    enforce: TokenEnforcePhase
    transform: Callable[[TokenDictionary], None]

    def __post_init__(self) -> None:
        _check_phase(self.name, self.enforce)

    def apply(self, dictionary: TokenDictionary) -> None:
        self.transform(dictionary)


@dataclass(frozen=True, slots=True)
class TokenTransformer:
    """A step that rewrites the value, name or extensions of matching tokens."""

    name: str
    enforce: TokenEnforcePhase
    type: TokenTransformType
    transform: Callable[[Token, TokenDictionary], Any]
    match: Callable[[Token], bool] | None = None

    def __post_init__(self) -> None:
        _check_phase(self.name, self.enforce)
        if self.type not in TOKEN_TRANSFORM_TYPES:
            joined = ", ".join(TOKEN_TRANSFORM_TYPES)
            raise ValueError(f"transformer {self.name!r}: type must be one of {joined}, got {self.type!r}")

    def apply(self, dictionary: TokenDictionary) -> None:
        for token in dictionary.all_tokens:
            if self.match is not None and not self.match(token):
                continue
            result = self.transform(token, dictionary)
            if self.type == "value":
                token.value = result
            elif self.type == "name":
                if not isinstance(result, str) or not result:
                    raise ValueError(f"transformer {self.name!r} returned an invalid name {result!r}")
                dictionary.rename_token(token, result)
            elif result:
                token.extensions.update(result)


PipelineStep = Union[TokenMiddleware, TokenTransformer]


class TransformPipeline:
    """Ordered pre and post step lists, kept apart structurally."""

    def __init__(self, steps: Iterable[PipelineStep] = ()) -> None:
        self._pre: list[PipelineStep] = []
        self._post: list[PipelineStep] = []
        self.use(*steps)

    @property
    def pre(self) -> tuple[PipelineStep, ...]:
        return tuple(self._pre)

    @property
    def post(self) -> tuple[PipelineStep, ...]:
        return tuple(self._post)

    def use(self, *steps: PipelineStep) -> TransformPipeline:
        for step in steps:
            if step.enforce == "pre":
                self._pre.append(step)
            elif step.enforce == "post":
                self._post.append(step)
            else:
                _check_phase(step.name, step.enforce)
        return self

    def __len__(self) -> int:
        return len(self._pre) + len(self._post)


def middleware(
    enforce: TokenEnforcePhase,
    *,
    name: str | None = None,
) -> Callable[[Callable[[TokenDictionary], None]], TokenMiddleware]:
    """Turn ``fn(dictionary)`` into a :class:`TokenMiddleware`."""

    def decorator(fn: Callable[[TokenDictionary], None]) -> TokenMiddleware:
        return TokenMiddleware(name=name or fn.__name__, enforce=enforce, transform=fn)

    return decorator


def transformer(
    type: TokenTransformType,
    *,
    enforce: TokenEnforcePhase = "pre",
    match: Callable[[Token], bool] | None = None,
    name: str | None = None,
) -> Callable[[Callable[[Token, TokenDictionary], Any]], TokenTransformer]:
    """Turn ``fn(token, dictionary)`` into a :class:`TokenTransformer`."""

    def decorator(fn: Callable[[Token, TokenDictionary], Any]) -> TokenTransformer:
        return TokenTransformer(
            name=name or fn.__name__,
            enforce=enforce,
            type=type,
            transform=fn,
            match=match,
        )

    return decorator
