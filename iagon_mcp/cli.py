"""Command line interface for iagon-mcp."""
from __future__ import annotations

import argparse
import asyncio
import dataclasses
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .cli_render import (
    console,
    render_batch_summary,
    render_configuration_summary,
    render_files_page,
    render_storage_info,
)
from .config import TRANSPORTS, Settings, load_env_file, resolve_default_env_file
from .constants import DEFAULT_PAGE_LIMIT
from .errors import ConfigurationError, IagonError
from .orchestrator import BatchSummary, BatchUploadOrchestrator, paginate
from .orchestrator.models import SummaryBuilder
from .server import create_server, run_server
from .services import IagonClient
from .tools.formatting import storage_info_to_dict, summary_to_dict, to_json

logger = logging.getLogger(__name__)


def _setup_logging(debug: bool, log_level: Optional[str]) -> str:
    """
    Configure the root logger with a rich handler on stderr.

    stdout is left alone since the stdio transport speaks MCP over it.
    Returns the effective level name.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    if debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.WARNING)
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    return logging.getLevelName(level)


def _apply_overrides(settings: Settings, args: argparse.Namespace) -> Settings:
    changes = {}
    for name in ("transport", "host", "port"):
        value = getattr(args, name, None)
        if value is not None:
            changes[name] = value
    return dataclasses.replace(settings, **changes) if changes else settings


def _exit_code(summary: BatchSummary) -> int:
    return 1 if summary.failed else 0


async def _run_upload(client: IagonClient, args: argparse.Namespace) -> int:
    orchestrator = BatchUploadOrchestrator(max_parallel=args.parallel)

    if len(args.paths) == 1:
        upload_fn = partial(client.upload_file, remote_name=args.name, folder_id=args.folder_id)
        builder = SummaryBuilder()
        builder.record(await orchestrator.upload_one(args.paths[0], upload_fn))
        summary = builder.build()
    else:
        if args.name:
            raise ConfigurationError("--name can only be used with a single path")
        upload_fn = partial(client.upload_file, folder_id=args.folder_id)
        summary = await orchestrator.bulk_upload(args.paths, upload_fn)

    _print_summary(summary, args.json)
    return _exit_code(summary)


async def _run_upload_dir(client: IagonClient, args: argparse.Namespace) -> int:
    orchestrator = BatchUploadOrchestrator(max_parallel=args.parallel)
    upload_fn = partial(client.upload_file, folder_id=args.folder_id)
    summary = await orchestrator.upload_directory(
        args.directory, upload_fn, recursive=args.recursive, pattern=args.pattern
    )
    _print_summary(summary, args.json)
    return _exit_code(summary)


def _print_summary(summary: BatchSummary, as_json: bool) -> None:
    if as_json:
        console.print_json(to_json(summary_to_dict(summary)))
    else:
        render_batch_summary(summary)


async def _run_ls(client: IagonClient, args: argparse.Namespace) -> int:
    async def fetch(limit: int, offset: int):
        return await client.list_files(folder_id=args.folder_id, limit=limit, offset=offset)

    page = await paginate(fetch, args.limit, args.offset)
    if args.json:
        console.print_json(to_json(page.to_dict()))
    else:
        render_files_page(page)
    return 0


async def _run_search(client: IagonClient, args: argparse.Namespace) -> int:
    async def fetch(limit: int, offset: int):
        return await client.search_files(args.query, limit=limit, offset=offset)

    page = await paginate(fetch, args.limit, args.offset)
    if args.json:
        console.print_json(to_json(page.to_dict()))
    else:
        render_files_page(page, title=f'Search "{args.query}"')
    return 0


async def _run_quota(client: IagonClient, args: argparse.Namespace) -> int:
    info = await client.get_storage_info()
    if args.json:
        console.print_json(to_json(storage_info_to_dict(info)))
    else:
        render_storage_info(info)
    return 0


COMMANDS = {
    "upload": _run_upload,
    "upload-dir": _run_upload_dir,
    "ls": _run_ls,
    "search": _run_search,
    "quota": _run_quota,
}


async def _run_command(settings: Settings, args: argparse.Namespace) -> int:
    async with IagonClient.from_settings(settings) as client:
        return await COMMANDS[args.command](client, args)


def _serve(settings: Settings) -> int:
    client = IagonClient.from_settings(settings)
    server = create_server(client)
    run_server(server, settings)
    return 0


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _add_page_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--limit", type=int, default=DEFAULT_PAGE_LIMIT, help="Page size (1-100)")
    parser.add_argument("--offset", type=int, default=0, help="Number of results to skip")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iagon-mcp",
        description="MCP server and command line client for Iagon decentralized storage.",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--version", action="version", version=f"iagon-mcp {__version__}")

    sub = parser.add_subparsers(dest="command")

    serve = sub.add_parser("serve", help="Run the MCP server (default)")
    serve.add_argument("--transport", choices=TRANSPORTS, default=None)
    serve.add_argument("--host", default=None)
    serve.add_argument("--port", type=int, default=None)

    upload = sub.add_parser("upload", help="Upload one or more files")
    upload.add_argument("paths", nargs="+", help="Local file paths")
    upload.add_argument("--folder-id", default=None, help="Destination folder id")
    upload.add_argument("--name", default=None, help="Remote name (single file only)")
    upload.add_argument("--parallel", type=_positive_int, default=1, help="Concurrent uploads")

    upload_dir = sub.add_parser("upload-dir", help="Upload every file in a directory")
    upload_dir.add_argument("directory", help="Local directory")
    upload_dir.add_argument("-r", "--recursive", action="store_true", help="Include subdirectories")
    upload_dir.add_argument("-p", "--pattern", default=None, help="Glob on file names, e.g. '*.mp4'")
    upload_dir.add_argument("--folder-id", default=None, help="Destination folder id")
    upload_dir.add_argument("--parallel", type=_positive_int, default=1, help="Concurrent uploads")

    ls = sub.add_parser("ls", help="List remote files")
    ls.add_argument("--folder-id", default=None, help="Only files in this folder")
    _add_page_args(ls)

    search = sub.add_parser("search", help="Search remote files by name")
    search.add_argument("query")
    _add_page_args(search)

    sub.add_parser("quota", help="Show storage usage")
    return parser


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        args.command = "serve"

    used_env_file = args.env_file or resolve_default_env_file()
    try:
        if used_env_file is not None:
            load_env_file(Path(used_env_file))
        settings = _apply_overrides(Settings.from_env(), args)
    except ConfigurationError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    effective_level = _setup_logging(debug=args.debug, log_level=args.log_level or settings.log_level)

    try:
        if args.command == "serve":
            if args.debug:
                render_configuration_summary(
                    {
                        "Transport": settings.transport,
                        "Address": (
                            f"{settings.host}:{settings.port}" if settings.transport == "http" else "-"
                        ),
                        "API": settings.api_base_url,
                        "Download": settings.download_url,
                        "Env File": str(used_env_file) if used_env_file else "-",
                        "Logging": effective_level,
                    }
                )
            return _serve(settings)
        return asyncio.run(_run_command(settings, args))
    except IagonError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
