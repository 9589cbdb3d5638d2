from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Sequence

from focustree import __version__
from focustree.app import main as run_app
from focustree.core.config import get_runtime_config
from focustree.core.errors import FocusTreeError, format_error
from focustree.core.paths import SETTINGS_FILENAME, resolve_settings_path
from focustree.core.session import FocusSession
from focustree.core.settings_store import SettingsStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="focustree",
        description="Focus Tree - pin folders and work with them from one sidebar.",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Print version and exit.",
    )

    parser.add_argument(
        "--no-ui",
        action="store_true",
        help="Apply --focus paths to the saved settings without launching the UI.",
    )

    parser.add_argument(
        "--settings",
        dest="settings_path",
        help=f"Use this {SETTINGS_FILENAME} instead of the per-user one.",
    )

    parser.add_argument(
        "-f",
        "--focus",
        dest="focus_paths",
        action="append",
        default=[],
        metavar="PATH",
        help="Focus a folder on startup (repeat for multiple).",
    )

    subparsers = parser.add_subparsers(dest="command")

    config_parser = subparsers.add_parser(
        "print-config",
        help=f"Print resolved runtime config and {SETTINGS_FILENAME} to stdout.",
    )
    config_parser.set_defaults(handler=handle_print_config)

    return parser


def _settings_store(args: argparse.Namespace) -> SettingsStore:
    override = args.settings_path or get_runtime_config().settings_path
    return SettingsStore(resolve_settings_path(override))


def handle_print_config(args: argparse.Namespace) -> None:
    settings_store = _settings_store(args)
    payload = {
        "runtime": get_runtime_config().model_dump(mode="json"),
        "settings_path": str(settings_store.path),
        "settings": settings_store.load(),
    }
    print(json.dumps(payload, indent=2))


def handle_headless(args: argparse.Namespace) -> None:
    session = FocusSession(_settings_store(args))
    session.activate(watch=False)
    try:
        for value in args.focus_paths:
            try:
                session.focus(Path(value))
            except FocusTreeError as exc:
                message, _ = format_error(exc)
                print(message)
        for path in session.path_set.paths:
            print(path)
    finally:
        session.deactivate()


def main(argv: Sequence[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "print-config":
        args.handler(args)
        return

    if args.no_ui:
        handle_headless(args)
        return

    run_app(
        settings_path=Path(args.settings_path) if args.settings_path else None,
        initial_paths=[Path(value) for value in args.focus_paths],
    )


if __name__ == "__main__":
    main()
