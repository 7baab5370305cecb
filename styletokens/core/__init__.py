"""Token dictionary core exports."""

from styletokens.core.builder import create_token_dictionary, default_pipeline
from styletokens.core.dictionary import TokenDictionary
from styletokens.core.formatter import (
    TokenCssVar,
    TokenFormatError,
    TokenFormatter,
    format_css_var,
    format_token_name,
)
from styletokens.core.models import ColorPaletteExtension, Token, TokenExtensions, TokenValidationError
from styletokens.core.palette import create_color_palettes_css_vars
from styletokens.core.pipeline import (
    TokenMiddleware,
    TokenTransformer,
    TransformPipeline,
    middleware,
    transformer,
)
from styletokens.core.walker import walk_object

__all__ = [
    "ColorPaletteExtension",
    "Token",
    "TokenCssVar",
    "TokenDictionary",
    "TokenExtensions",
    "TokenFormatError",
    "TokenFormatter",
    "TokenMiddleware",
    "TokenTransformer",
    "TokenValidationError",
    "TransformPipeline",
    "create_color_palettes_css_vars",
    "create_token_dictionary",
    "default_pipeline",
    "format_css_var",
    "format_token_name",
    "middleware",
    "transformer",
    "walk_object",
]
