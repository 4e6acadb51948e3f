"""Command line interface for superbed plugin."""
from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from rich.logging import RichHandler
from rich.prompt import Prompt

from .cli_output import render_configuration_summary, render_results
from .models import OutputItem, UploadContext
from .plugin import SuperbedPlugin, build_config_schema
from .protocols import PluginHost
from .services import ConsoleNotifier, DebugSink, HTTPRequester, JsonConfigStore
from .settings import SuperbedSettings
from .use_cases.auth import load_plugin_config


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

    if silent or (not debug and not log_level and not os.getenv("LOG_LEVEL")):
        logging.disable(logging.CRITICAL)
        root_logger.setLevel(logging.CRITICAL + 1)
        return "silent"

    if debug:
        level = logging.DEBUG
    elif log_level:
        level = getattr(logging, log_level.upper(), logging.INFO)
    else:
        env_level = os.getenv("LOG_LEVEL")
        level = getattr(logging, (env_level or "INFO").upper(), logging.INFO)

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


def _resolve_config_file(config_file: Optional[Path]) -> Optional[Path]:
    if config_file is not None:
        return config_file
    env_config = os.getenv("SUPERBED_CONFIG_FILE")
    return Path(env_config) if env_config else None


def _collect_items(files: Sequence[Path]) -> List[OutputItem]:
    items = []
    for path in files:
        if not path.is_file():
            raise CLIError(f"not a file: {path}")
        items.append(OutputItem(file_name=path.name, buffer=path.read_bytes()))
    return items


async def _run_upload(
    files: Sequence[Path],
    settings: SuperbedSettings,
    config_store: JsonConfigStore,
) -> int:
    context = UploadContext(output=_collect_items(files))
    notifier = ConsoleNotifier()

    async with HTTPRequester(timeout=settings.timeout) as requester:
        host = PluginHost(
            requester=requester,
            config_store=config_store,
            notifier=notifier,
            debug=DebugSink(requester, settings.debug_url, enabled=settings.debug_enabled),
        )
        plugin = SuperbedPlugin(host, settings)
        await plugin.handle(context)

    render_results(context.output)
    return 0 if all(item.img_url for item in context.output) else 1


def _run_config(
    config_store: JsonConfigStore,
    settings: SuperbedSettings,
    values: Dict[str, Optional[str]],
) -> int:
    current = load_plugin_config(config_store, settings.config_key)

    if not any(value is not None for value in values.values()):
        for setting in build_config_schema(current):
            values[setting.name] = Prompt.ask(
                setting.message,
                default=setting.default or "",
                password=setting.type == "password",
                show_default=setting.type != "password",
            )
        # Blank password prompt keeps the stored one.
        if not values.get("password"):
            values["password"] = current.get("password", "")

    updated = dict(current)
    for key, value in values.items():
        if value is not None:
            updated[key] = value
    config_store.save_config(settings.config_key, updated)
    print(f"Saved {settings.config_key} to {config_store.path}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="superbed-up",
        description="Upload images to superbed using the superbed uploader plugin.",
    )
    parser.add_argument(
        "--config-file",
        type=Path,
        default=None,
        help="Config JSON path (default from SUPERBED_CONFIG_FILE or ~/.config/superbed/config.json)",
    )
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Load environment variables from this .env file",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logs")
    parser.add_argument("--silent", action="store_true", help="Only print errors")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Explicit log level (DEBUG/INFO/WARNING/ERROR)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Send request traces to the debug collector (SUPERBED_DEBUG_URL)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="superbed-up (from superbed)",
    )

    commands = parser.add_subparsers(dest="command")

    upload = commands.add_parser("upload", help="Upload image files")
    upload.add_argument("files", nargs="+", type=Path, help="Image files to upload")

    config = commands.add_parser("config", help="Store account credentials")
    config.add_argument("--token", default=None, help="Paid account API token")
    config.add_argument("--username", default=None, help="Free account username")
    config.add_argument("--password", default=None, help="Free account password")
    return parser


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

    effective_log_mode = _setup_logging(
        debug=args.debug,
        silent=args.silent,
        log_level=args.log_level,
    )

    if args.command is None:
        parser.print_help()
        return 0

    settings = SuperbedSettings.from_env(debug=True if args.trace else None)
    config_store = JsonConfigStore(_resolve_config_file(args.config_file))

    if args.command == "config":
        return _run_config(
            config_store,
            settings,
            {"token": args.token, "username": args.username, "password": args.password},
        )

    files = [Path(f).expanduser() for f in args.files]
    render_configuration_summary(
        {
            "Files": len(files),
            "Config File": str(config_store.path),
            "Site": settings.site_url,
            "Trace": settings.debug_url if settings.debug_enabled else "off",
            "Env File": str(used_env_file) if used_env_file else "-",
            "Logging": effective_log_mode,
        }
    )

    try:
        return asyncio.run(_run_upload(files, settings, config_store))
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
