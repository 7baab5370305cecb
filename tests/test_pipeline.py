"""Tests for the two-stage transform pipeline."""

from __future__ import annotations

import pytest

from styletokens.core.builder import create_token_dictionary
from styletokens.core.dictionary import TokenDictionary
from styletokens.core.models import Token
from styletokens.core.pipeline import (
    TokenMiddleware,
    TokenTransformer,
    TransformPipeline,
    middleware,
    transformer,
)
from styletokens.errors import ErrorCode, TokenPipelineError


def _tokens() -> dict[str, object]:
    return {
        "colors": {
            "black": "#000",
            "white": "#fff",
            "red": {"500": "#f00", "600": "#c00"},
            "blue": {"500": "#00f"},
        },
        "spacing": {"0": "0", "1": "4px", "0.5": "2px"},
        "shadows": {
            "sm": {"value": {"offsetX": 0, "offsetY": "1px", "blur": "2px", "color": "{colors.black}"}},
        },
        "easings": {"default": {"value": [0.4, 0, 0.2, 1]}},
        "fonts": {"body": {"value": ["Inter", "sans-serif"]}},
    }


def _semantic_tokens() -> dict[str, object]:
    return {
        "colors": {
            "primary": {"value": "{colors.red.500}"},
            "bg": {"value": {"base": "{colors.white}", "_dark": "{colors.black}"}},
        },
    }


def _build(*steps) -> TokenDictionary:
    return TokenDictionary(_tokens(), pipeline=TransformPipeline(steps)).build()


def test_pipeline_keeps_pre_and_post_steps_apart() -> None:
    pre = TokenMiddleware(name="pre", enforce="pre", transform=lambda dictionary: None)
    post = TokenMiddleware(name="post", enforce="post", transform=lambda dictionary: None)

    pipeline = TransformPipeline([post, pre])

    assert pipeline.pre == (pre,)
    assert pipeline.post == (post,)
    assert len(pipeline) == 2


def test_invalid_phase_and_type_are_rejected() -> None:
    with pytest.raises(ValueError):
        TokenMiddleware(name="bad", enforce="during", transform=lambda dictionary: None)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        TokenTransformer(name="bad", enforce="pre", type="color", transform=lambda token, d: None)  # type: ignore[arg-type]


def test_steps_run_in_phase_then_registration_order() -> None:
    calls: list[tuple[str, bool]] = []

    def record(label: str):
        def step(dictionary: TokenDictionary) -> None:
            calls.append((label, dictionary.is_indexed))

        return step

    _build(
        TokenMiddleware(name="post-1", enforce="post", transform=record("post-1")),
        TokenMiddleware(name="pre-1", enforce="pre", transform=record("pre-1")),
        TokenMiddleware(name="pre-2", enforce="pre", transform=record("pre-2")),
        TokenMiddleware(name="post-2", enforce="post", transform=record("post-2")),
    )

    assert calls == [
        ("pre-1", False),
        ("pre-2", False),
        ("post-1", True),
        ("post-2", True),
    ]


def test_post_step_observes_rename_made_in_pre_step() -> None:
    observed: dict[str, str] = {}

    @transformer("name", match=lambda token: token.name == "colors.red.500")
    def rename_red(token: Token, dictionary: TokenDictionary) -> str:
        return "colors.brand.500"

    @middleware("post")
    def read_css_vars(dictionary: TokenDictionary) -> None:
        observed.update(dictionary.css_var_map["colors"])

    dictionary = _build(read_css_vars, rename_red)

    assert "colors.brand.500" in observed
    assert "colors.red.500" not in observed
    assert observed["colors.brand.500"] == "--colors-red-500"
    assert dictionary.get_by_name("colors.red.500") is None
    assert dictionary.get_by_name("colors.brand.500").path == ("colors", "red", "500")


def test_registering_the_old_name_after_a_rename_adds_a_new_token() -> None:
    seen_before_register: list[object] = []

    @transformer("name", match=lambda token: token.name == "colors.red.500")
    def rename_red(token: Token, dictionary: TokenDictionary) -> str:
        return "colors.brand.500"

    @middleware("pre")
    def restore_red(dictionary: TokenDictionary) -> None:
        seen_before_register.append(dictionary.get_by_name("colors.red.500"))
        seen_before_register.append(dictionary.get_by_name("colors.brand.500").value)
        dictionary.register_token(Token.create(["colors", "red", "500"], "#e00"))

    dictionary = _build(rename_red, restore_red)

    assert seen_before_register == [None, "#f00"]
    names = [token.name for token in dictionary.all_tokens]
    assert names.count("colors.brand.500") == 1
    assert names.count("colors.red.500") == 1
    assert dictionary.get_by_name("colors.brand.500").value == "#f00"
    assert dictionary.get_by_name("colors.red.500").value == "#e00"


def test_rename_onto_an_existing_name_replaces_that_token() -> None:
    @transformer("name", match=lambda token: token.name == "colors.red.500")
    def merge_red(token: Token, dictionary: TokenDictionary) -> str:
        return "colors.red.600"

    dictionary = _build(merge_red)

    names = [token.name for token in dictionary.all_tokens]
    assert names.count("colors.red.600") == 1
    assert "colors.red.500" not in names
    assert dictionary.get_by_name("colors.red.600").value == "#f00"


def test_rename_in_post_phase_updates_indexes() -> None:
    @transformer("name", enforce="post", match=lambda token: token.name == "colors.blue.500")
    def rename_blue(token: Token, dictionary: TokenDictionary) -> str:
        return "colors.sky.500"

    dictionary = _build(rename_blue)

    assert "colors.blue.500" not in dictionary.flat_map
    assert dictionary.flat_map["colors.sky.500"] == "--colors-blue-500"
    assert "colors.sky.500" in dictionary.category_map["colors"]


def test_value_transformer_only_touches_matching_tokens() -> None:
    @transformer("value", match=lambda token: token.category == "colors")
    def upper(token: Token, dictionary: TokenDictionary) -> str:
        return str(token.value).upper()

    dictionary = _build(upper)

    assert dictionary.get_by_name("colors.white").value == "#FFF"
    assert dictionary.get_by_name("spacing.1").value == "4px"


def test_extensions_transformer_fills_fields_and_extra() -> None:
    @transformer("extensions", enforce="post")
    def tag(token: Token, dictionary: TokenDictionary) -> dict[str, object]:
        return {"virtual": False, "source": "figma"}

    token = _build(tag).get_by_name("colors.black")

    assert token.extensions.virtual is False
    assert token.extensions.extra == {"source": "figma"}


def test_failing_step_aborts_the_build() -> None:
    @middleware("pre")
    def explode(dictionary: TokenDictionary) -> None:
        raise RuntimeError("boom")

    dictionary = TokenDictionary(_tokens(), pipeline=TransformPipeline([explode]))
    with pytest.raises(TokenPipelineError) as excinfo:
        dictionary.build()

    assert excinfo.value.code is ErrorCode.PIPELINE_FAILED
    assert excinfo.value.details == {"step": "explode", "phase": "pre"}
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert not dictionary.is_frozen


def test_pre_step_cannot_read_derived_indexes() -> None:
    @middleware("pre")
    def peek(dictionary: TokenDictionary) -> None:
        dictionary.flat_map

    with pytest.raises(TokenPipelineError):
        _build(peek)


def _snapshot(dictionary: TokenDictionary) -> dict[str, object]:
    return {
        "tokens": [
            (
                token.name,
                token.path,
                token.value,
                token.extensions.css_var,
                token.extensions.color_palette,
                token.extensions.conditions,
                sorted(token.extensions.references),
            )
            for token in dictionary.all_tokens
        ],
        "flat_map": dict(dictionary.flat_map),
        "css_var_map": {key: dict(value) for key, value in dictionary.css_var_map.items()},
        "color_palette_map": {key: dict(value) for key, value in dictionary.color_palette_map.items()},
    }


def test_running_the_pipeline_twice_is_idempotent() -> None:
    dictionary = create_token_dictionary(_tokens(), _semantic_tokens(), prefix="ck")
    before = _snapshot(dictionary)

    dictionary.run_pipeline()

    assert _snapshot(dictionary) == before
    assert dictionary.is_frozen
