"""Command line interface for bulk_uploader."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import httpx
from rich.logging import RichHandler

from . import __version__
from .cli_progress import BatchUploadDisplay, render_configuration_summary
from .models import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_CONCURRENCY,
    DEFAULT_ERROR_LOG,
    DEFAULT_LABEL,
    DEFAULT_TIMEOUT,
    RunConfig,
)
from .orchestrator import BatchUploadRun, SourceDirectoryError
from .services import FailureRecorder, HTTPUploadClient


USAGE_EXAMPLE = """\
Example:
  bulk-up \\
    --e=http://localhost:8080/api/v2/sbom \\
    --s=/home/user/Downloads/atlas-s3/sbom/spdx/ \\
    --c=10 \\
    --b=700
"""


class CLIError(RuntimeError):
    """Raised when CLI validation/execution fails."""


def _setup_logging(debug: bool, silent: bool, log_level: Optional[str]) -> str:
    """
    Configure logging.

    Default behavior is silent unless --debug or --log-level is provided.
    Returns a string describing effective mode.
    """
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    logging.disable(logging.NOTSET)

    if silent or (not debug and not log_level):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    else:
        env_level = os.getenv("LOG_LEVEL")
        level = getattr(logging, (log_level or env_level or "INFO").upper(), logging.INFO)

    handler = RichHandler(
        rich_tracebacks=True,
        markup=False,
        show_time=False,
        show_path=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    return logging.getLevelName(level)


def _strip_optional_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
        return value[1:-1]
    return value


def _load_env_file(path: Path, override: bool = False) -> None:
    if not path.exists():
        raise CLIError(f"env file not found: {path}")
    if not path.is_file():
        raise CLIError(f"env path is not a file: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CLIError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            continue

        value = _strip_optional_quotes(value.strip())
        if override or key not in os.environ:
            os.environ[key] = value


def _resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None


def _positive_int(value: str) -> int:
    try:
        number = int(value, 10)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0, got {value}")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bulk-up",
        description="Upload every file of a directory to an HTTP endpoint in batches.",
        epilog=USAGE_EXAMPLE,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
        allow_abbrev=False,
    )
    required = parser.add_argument_group("required")
    required.add_argument(
        "--e",
        dest="endpoint",
        metavar="ENDPOINT",
        default=None,
        help=(
            "Endpoint URL (e.g. http://localhost:8080/api/v2/sbom "
            "or http://localhost:8080/api/v2/advisory); env BULK_UP_ENDPOINT"
        ),
    )
    required.add_argument(
        "--s",
        dest="source",
        metavar="DIR",
        default=None,
        help="Source directory containing the files to upload; env BULK_UP_SOURCE",
    )

    options = parser.add_argument_group("options")
    options.add_argument(
        "--c",
        dest="concurrency",
        metavar="N",
        type=_positive_int,
        default=DEFAULT_CONCURRENCY,
        help=f"Concurrent uploads (default: {DEFAULT_CONCURRENCY})",
    )
    options.add_argument(
        "--b",
        dest="batch_size",
        metavar="N",
        type=_positive_int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Batch size per round (default: {DEFAULT_BATCH_SIZE})",
    )
    options.add_argument(
        "--l",
        dest="label",
        metavar="LABEL",
        default=None,
        help=f"Value of the 'labels' query parameter (default: BULK_UP_LABEL or {DEFAULT_LABEL})",
    )
    options.add_argument(
        "--o",
        dest="error_log",
        metavar="FILE",
        default=None,
        help=f"File receiving failed paths (default: BULK_UP_ERROR_LOG or {DEFAULT_ERROR_LOG})",
    )
    options.add_argument(
        "--t",
        dest="timeout",
        metavar="SECONDS",
        type=_positive_float,
        default=DEFAULT_TIMEOUT,
        help=f"Per-request timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    options.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    options.add_argument("--debug", action="store_true", help="Enable debug logs")
    options.add_argument("--silent", action="store_true", help="Disable logs entirely")
    options.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    options.add_argument("--h", "--help", action="help", help="Show this help and exit")
    options.add_argument(
        "--version",
        action="version",
        version=f"bulk-up {__version__}",
    )
    return parser


def build_config(args: argparse.Namespace, parser: argparse.ArgumentParser) -> RunConfig:
    """Merge parsed flags with environment fallbacks; exits via parser on missing values."""
    endpoint = args.endpoint or os.getenv("BULK_UP_ENDPOINT")
    source = args.source or os.getenv("BULK_UP_SOURCE")

    missing = []
    if not endpoint:
        missing.append("--e")
    if not source:
        missing.append("--s")
    if missing:
        parser.error(f"the following arguments are required: {', '.join(missing)}")

    return RunConfig(
        endpoint_url=endpoint,
        source_dir=source,
        concurrency=args.concurrency,
        batch_size=args.batch_size,
        label=args.label or os.getenv("BULK_UP_LABEL") or DEFAULT_LABEL,
        error_log_path=args.error_log or os.getenv("BULK_UP_ERROR_LOG") or DEFAULT_ERROR_LOG,
        timeout=args.timeout,
    )


async def _run_upload(
    config: RunConfig,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> int:
    display = BatchUploadDisplay()
    recorder = FailureRecorder(config.error_log_path)

    async with HTTPUploadClient(
        config.endpoint_url,
        label=config.label,
        timeout=config.timeout,
        max_connections=config.concurrency,
        transport=transport,
    ) as client:
        run = BatchUploadRun(config, client, recorder=recorder)
        run.on_batch_start(display.on_batch_start)
        run.on_file_complete(display.on_file_complete)
        run.on_file_fail(display.on_file_fail)
        run.on_batch_complete(display.on_batch_complete)
        run.on_finish(display.on_finish)

        try:
            await run.run()
        except SourceDirectoryError as exc:
            raise CLIError(str(exc)) from exc
        except OSError as exc:
            raise CLIError(f"cannot write error log {config.error_log_path}: {exc}") from exc
        finally:
            display.close()

    return 0


def run_cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    used_env_file = args.env_file or _resolve_default_env_file()
    if used_env_file is not None:
        try:
            _load_env_file(Path(used_env_file))
        except CLIError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1

    config = build_config(args, parser)

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    render_configuration_summary(
        {
            "Endpoint": config.endpoint_url,
            "Source": config.source_dir,
            "Concurrency": config.concurrency,
            "Batch Size": config.batch_size,
            "Label": config.label,
            "Timeout": f"{config.timeout:g}s",
            "Error Log": config.error_log_path,
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(_run_upload(config))
    except CLIError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("Cancelled.", file=sys.stderr)
        return 130


def main() -> None:
    raise SystemExit(run_cli())


if __name__ == "__main__":
    main()
