"""
jsonbatch CLI

Build JSON documents from schemas and run batch request templates.

Usage:
    jsonbatch build schema.yml document.json
    jsonbatch run batch.yml --request original.json
    jsonbatch serve --port 7431
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from rich.logging import RichHandler

from .builder import JsonBuilder
from .config import (
    JsonBatchConfig,
    load_batch_template,
    load_config,
    load_document,
    load_request,
    validate_template_file,
)
from .context import DocumentContext
from .dispatcher import HttpxDispatcher
from .display import ConsoleListener, console, err_console, print_error, print_json, print_response
from .engine import BatchEngine
from .errors import JsonBatchError
from .models import Request
from .server import BatchServer, run_server


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _dispatcher_for(config: JsonBatchConfig) -> HttpxDispatcher:
    return HttpxDispatcher(
        base_url=config.base_url,
        timeout=config.timeout,
        default_headers=config.default_headers,
    )


def _optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value).resolve() if value else None


def _run_build(args: argparse.Namespace) -> None:
    config = load_config(_optional_path(args.config))
    schema = load_document(Path(args.schema).resolve())
    document = load_document(Path(args.document).resolve())

    builder = JsonBuilder(max_depth=config.max_depth)
    print_json(builder.build(schema, DocumentContext.of(document)))


def _run_batch(args: argparse.Namespace) -> None:
    config = load_config(_optional_path(args.config))
    template_path = Path(args.template).resolve()
    is_valid, error_msg = validate_template_file(template_path)
    if not is_valid:
        print_error(f"Invalid batch template: {error_msg}")
        sys.exit(1)
    template = load_batch_template(template_path)
    original = load_request(Path(args.request).resolve()) if args.request else Request()

    with _dispatcher_for(config) as dispatcher:
        engine = BatchEngine(
            JsonBuilder(max_depth=config.max_depth),
            dispatcher,
            listener=ConsoleListener(),
        )
        response = engine.execute(original, template)

    print_response(response)


def _run_serve(args: argparse.Namespace) -> None:
    config = load_config(_optional_path(args.config))
    with _dispatcher_for(config) as dispatcher:
        engine = BatchEngine(JsonBuilder(max_depth=config.max_depth), dispatcher)
        console.print(
            f"[bold]jsonbatch[/bold] listening on "
            f"[cyan]http://{args.host}:{args.port}/batch[/cyan]"
        )
        run_server(engine, port=args.port, host=args.host)


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Build JSON from schemas and run batch request templates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    jsonbatch build schema.yml data.json
    jsonbatch run batch.yml --request original.json
    jsonbatch serve --port 7431 --config jsonbatch.yml
        """,
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=False,
        help="Log every evaluation and dispatch step",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="YAML config with max_depth, timeout, base_url and default_headers",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build_parser = subparsers.add_parser("build", help="Evaluate a schema against a document")
    build_parser.add_argument("schema", help="Schema file (YAML or JSON)")
    build_parser.add_argument("document", help="Document file (JSON or YAML)")
    build_parser.set_defaults(handler=_run_build)

    run_parser = subparsers.add_parser("run", help="Execute a batch template")
    run_parser.add_argument("template", help="Batch template file (YAML or JSON)")
    run_parser.add_argument(
        "-r",
        "--request",
        default=None,
        help="Original request file with http_method, url, headers and body",
    )
    run_parser.set_defaults(handler=_run_batch)

    serve_parser = subparsers.add_parser("serve", help="Serve POST /batch over HTTP")
    serve_parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=BatchServer.DEFAULT_PORT,
        help=f"Port to listen on (default: {BatchServer.DEFAULT_PORT})",
    )
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind")
    serve_parser.set_defaults(handler=_run_serve)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        args.handler(args)
    except (JsonBatchError, FileNotFoundError) as e:
        print_error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        err_console.print("\n[yellow]Interrupted[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
