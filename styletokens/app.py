"""Command-line bootstrap."""

from __future__ import annotations

import argparse
import json
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys

from styletokens import __version__
from styletokens.config.settings import TokenSettings
from styletokens.core.builder import create_token_dictionary
from styletokens.core.css import generate_stylesheet, get_color_palette_css, get_token_css
from styletokens.core.loader import load_token_definitions
from styletokens.core.models import TokenValidationError
from styletokens.errors import ErrorCode, StyleTokensError, classify_exception, format_error_for_user


def _configure_logger(settings: TokenSettings) -> logging.Logger:
    logger = logging.getLogger("styletokens")
    if logger.handlers:
        return logger

    logger.setLevel(settings.log_level)
    handler: logging.Handler
    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_path,
            maxBytes=512_000,
            backupCount=3,
            encoding="utf-8",
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="styletokens",
        description="Resolve design tokens into CSS custom properties.",
    )
    parser.add_argument("definitions", type=Path, help="YAML or JSON token definition file")
    parser.add_argument("--config", type=Path, help="YAML settings file")
    parser.add_argument("--prefix", help="namespace for generated CSS variables")
    parser.add_argument("--palette", help="color palette wired into the root block")
    parser.add_argument("--format", choices=("css", "json"), default="css")
    parser.add_argument("--output", "-o", type=Path, help="write to a file instead of stdout")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run_app(argv: list[str] | None = None) -> int:
    """Build a stylesheet from the command line and return an exit code."""
    args = build_parser().parse_args(argv)
    try:
        settings = TokenSettings.from_file(args.config) if args.config else TokenSettings()
    except StyleTokensError as exc:
        print(format_error_for_user(exc), file=sys.stderr)
        return 1
    if args.prefix is not None:
        settings.prefix = args.prefix
    if args.palette:
        settings.default_palette = args.palette

    logger = _configure_logger(settings)
    logger.info("building tokens from %s prefix=%r", args.definitions, settings.prefix)

    if not args.definitions.is_file():
        error = StyleTokensError(ErrorCode.DEFINITION_NOT_FOUND, path=args.definitions)
        print(format_error_for_user(error), file=sys.stderr)
        return 2
    try:
        definitions = load_token_definitions(args.definitions)
    except TokenValidationError as exc:
        logger.error("invalid token definitions: %s", exc)
        print(format_error_for_user(classify_exception(exc, args.definitions)), file=sys.stderr)
        return 2

    try:
        dictionary = create_token_dictionary(
            definitions.tokens,
            definitions.semantic_tokens,
            settings=settings,
        )
    except StyleTokensError as exc:
        logger.error("token build failed: %s", exc.to_dict())
        print(format_error_for_user(exc), file=sys.stderr)
        return 1

    if args.format == "json":
        declarations = get_token_css(dictionary)
        declarations.update(get_color_palette_css(dictionary, settings.default_palette))
        output = json.dumps(declarations, indent=2) + "\n"
    else:
        output = generate_stylesheet(
            dictionary,
            root=settings.css_vars_root,
            default_palette=settings.default_palette,
            palette_scopes=settings.palette_scopes,
            title=f"Tokens: {args.definitions.name}",
        )

    if args.output is None:
        sys.stdout.write(output)
        return 0
    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(output, encoding="utf-8")
    except OSError as exc:
        error = StyleTokensError(
            ErrorCode.OUTPUT_WRITE_FAILED,
            path=args.output,
            details={"original": str(exc)},
        )
        logger.error("could not write output: %s", error.to_dict())
        print(format_error_for_user(error), file=sys.stderr)
        return 1
    logger.info("wrote %s", args.output)
    return 0
