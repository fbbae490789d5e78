"""CLI entrypoints for schemaids commands."""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

from fastapi import FastAPI

from .config import ConfigError, SchemaIdsConfig, build_options, load_config
from .logging import configure_logging, get_logger
from .pipeline import DocumentBuildError, DocumentBuilder

_DEFAULT_APP = "schemaids.demo:create_demo_api"


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_log_file_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "--log-file",
        type=Path,
        default=argparse.SUPPRESS if suppress_default else None,
        help="Also write detailed logs to this file.",
    )


def _add_config_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .schemaids.yml or the directory containing it (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schemaids",
        description="Generate OpenAPI documents with display-friendly schema ids.",
    )
    _add_verbose_option(parser)
    _add_log_file_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser(
        "export",
        help="Write the OpenAPI document for a FastAPI app as JSON.",
    )
    _add_verbose_option(export_parser, suppress_default=True)
    _add_log_file_option(export_parser, suppress_default=True)
    _add_config_option(export_parser)
    export_parser.add_argument(
        "app",
        nargs="?",
        default=_DEFAULT_APP,
        help="FastAPI app or factory as 'module:attribute' (defaults to the demo API).",
    )
    export_parser.add_argument(
        "-o",
        "--output",
        help="File to write the document to (defaults to stdout).",
    )
    export_parser.add_argument(
        "--include-value-types",
        action="store_true",
        default=None,
        help="Also rename enums and other value-like schemas.",
    )
    export_parser.add_argument(
        "--separator",
        help="Separator placed between outer and nested type names.",
    )
    export_parser.add_argument(
        "--short-names",
        action="store_true",
        help="Drop the module prefix from schema ids.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Serve the demo API with its document, Swagger UI and ReDoc.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    _add_log_file_option(serve_parser, suppress_default=True)
    _add_config_option(serve_parser)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def load_app(reference: str) -> FastAPI:
    """Import ``module:attribute`` and return the FastAPI app it names or builds."""
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"App reference must look like 'module:attribute', got '{reference}'")
    module = importlib.import_module(module_name)
    try:
        target = getattr(module, attribute)
    except AttributeError as exc:
        raise ValueError(f"Module '{module_name}' has no attribute '{attribute}'") from exc
    if not isinstance(target, FastAPI) and callable(target):
        target = target()
    if not isinstance(target, FastAPI):
        raise ValueError(f"'{reference}' is not a FastAPI application")
    return target


def _apply_overrides(config: SchemaIdsConfig, args: argparse.Namespace) -> SchemaIdsConfig:
    if args.include_value_types:
        config.schema_ids.include_value_types = True
    if args.separator is not None:
        config.schema_ids.separator = args.separator
    if args.short_names:
        config.schema_ids.include_module = False
    return config


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for schemaids commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "export":
        config = _apply_overrides(config, args)
        try:
            app = load_app(args.app)
        except (ImportError, ValueError) as exc:
            parser.exit(1, f"{exc}\n")
        try:
            document = DocumentBuilder(app, build_options(config)).build()
        except DocumentBuildError as exc:
            parser.exit(1, f"schemaids export failed: {exc}\nRun with --verbose for more details.\n")
        payload = json.dumps(document, indent=2) + "\n"
        if args.output:
            output = Path(args.output)
            output.write_text(payload, encoding="utf-8")
            logger.info("OpenAPI document written to %s", output)
        else:
            sys.stdout.write(payload)
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(args.host, args.port, options=build_options(config))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
