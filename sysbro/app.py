"""Command-line front end: dashboard, cleaner, services, tools and settings."""

from __future__ import annotations

import argparse
import configparser
import itertools
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from sysbro.dashboard import render_snapshot, render_system_info
from sysbro.monitor import Monitor
from sysbro.scanner import CleanupError, Scanner
from sysbro.services import ServiceError, ServiceModel
from sysbro.tools import ToolsModel, launch_tool
from sysbro.utils import format_bytes

VERSION = "1.0"
DESCRIPTION = "Sysbro is a system assistant that monitors CPU, memory and more..."
TABS = ("Home", "Cleaner", "Speed up", "Tools")

_SECTION = "General"
_TRAY_KEY = "tray_icon"


@dataclass
class Settings:
    """User preferences kept between runs."""

    tray_icon: bool = False


def default_settings_path() -> Path:
    """Return where settings are stored by default."""
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "sysbro.conf"


def load_settings(path: str | os.PathLike | None = None) -> Settings:
    """Read settings; a missing or unreadable file gives the defaults."""
    path = Path(path) if path is not None else default_settings_path()
    parser = configparser.ConfigParser()
    try:
        with path.open(encoding="utf-8") as handle:
            parser.read_file(handle)
        tray_icon = parser.getboolean(_SECTION, _TRAY_KEY, fallback=False)
    except (OSError, configparser.Error, ValueError):
        return Settings()
    return Settings(tray_icon=tray_icon)


def save_settings(settings: Settings, path: str | os.PathLike | None = None) -> None:
    """Write settings, creating the directory if needed."""
    path = Path(path) if path is not None else default_settings_path()
    parser = configparser.ConfigParser()
    parser[_SECTION] = {_TRAY_KEY: "true" if settings.tray_icon else "false"}
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        parser.write(handle, space_around_delimiters=False)


def _cmd_home(args: argparse.Namespace) -> int:
    count = getattr(args, "count", 1)
    interval = getattr(args, "interval", 2.0)
    print(render_system_info())
    monitor = Monitor(interval)
    snapshots = monitor.snapshots()
    if count > 0:
        snapshots = itertools.islice(snapshots, count)
    try:
        for snapshot in snapshots:
            print()
            print(render_snapshot(snapshot))
    except KeyboardInterrupt:
        pass
    return 0


def _cmd_clean(args: argparse.Namespace) -> int:
    scanner = Scanner(args.home)
    result = scanner.scan()
    for group in result:
        print(f"{group.label}\t{group.size_text}")
        if args.verbose:
            for entry in group.entries:
                print(f"    {entry.name}\t{entry.size_text}")
    print(f"Scan is successful, and a total of {result.total_text} files were found this time")
    if not args.delete:
        return 0
    for group in result:
        group.set_checked(True)
    if not any(group.entries for group in result):
        print("Nothing to clean up")
        return 0
    try:
        freed = scanner.clean(result)
    except CleanupError as exc:
        print(f"sysbro: {exc}", file=sys.stderr)
        return 1
    print(f"Clean up successfully, clean up a total of {format_bytes(freed)} files")
    return 0


def _cmd_services(args: argparse.Namespace) -> int:
    model = ServiceModel()
    try:
        model.load()
        if args.toggle:
            model.switch_status(args.toggle)
    except KeyError:
        print(f"sysbro: unknown service {args.toggle}", file=sys.stderr)
        return 1
    except ServiceError as exc:
        print(f"sysbro: {exc}", file=sys.stderr)
        return 1
    print(f"Your computer has {model.enabled_count()} startup items")
    print("Turn off unnecessary startup services can enhance boot speed")
    for item in model:
        print(f"{item.name:<40} {item.status_text:<9} {item.description}")
    return 0


def _cmd_tools(args: argparse.Namespace) -> int:
    model = ToolsModel(args.locale)
    if args.launch is None:
        for tool in model:
            print(f"{tool.key}\t{tool.name}")
        return 0
    if args.launch not in model:
        print(f"sysbro: unknown tool {args.launch}", file=sys.stderr)
        return 1
    try:
        launch_tool(args.launch)
    except OSError as exc:
        print(f"sysbro: cannot start {args.launch}: {exc}", file=sys.stderr)
        return 1
    return 0


def _cmd_tray(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    if args.toggle:
        settings.tray_icon = not settings.tray_icon
        save_settings(settings, args.config)
    print(f"Display tray icon: {'on' if settings.tray_icon else 'off'}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sysbro", description=DESCRIPTION)
    parser.add_argument("--version", action="version", version=VERSION)
    parser.add_argument("--config", type=Path, default=None, help="settings file")
    commands = parser.add_subparsers(dest="command")

    home = commands.add_parser("home", help="system information and live statistics")
    home.add_argument("--count", type=int, default=1, help="rounds to show, 0 for no end")
    home.add_argument("--interval", type=float, default=2.0, help="seconds per round")
    home.set_defaults(handler=_cmd_home)

    clean = commands.add_parser("clean", help="scan for reclaimable disk space")
    clean.add_argument("--home", type=Path, default=None, help="home directory to scan")
    clean.add_argument("--delete", action="store_true", help="delete everything found")
    clean.add_argument("-v", "--verbose", action="store_true", help="list every entry")
    clean.set_defaults(handler=_cmd_clean)

    services = commands.add_parser("services", help="startup services")
    services.add_argument("--toggle", metavar="NAME", help="enable or disable a service")
    services.set_defaults(handler=_cmd_services)

    tools = commands.add_parser("tools", help="companion tools")
    tools.add_argument("--locale", default=None, help="locale name, e.g. zh_CN")
    tools.add_argument("--launch", metavar="KEY", help="start a tool")
    tools.set_defaults(handler=_cmd_tools)

    tray = commands.add_parser("tray", help="tray icon setting")
    tray.add_argument("--toggle", action="store_true", help="switch the setting")
    tray.set_defaults(handler=_cmd_tray)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return the exit status."""
    args = _build_parser().parse_args(argv)
    handler = getattr(args, "handler", _cmd_home)
    return handler(args)


if __name__ == "__main__":
    sys.exit(main())