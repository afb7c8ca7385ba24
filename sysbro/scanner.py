"""Scanning for reclaimable files and deleting the ones the user selects."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Callable, Iterable, Iterator, Sequence

from sysbro.utils import (
    format_bytes,
    get_app_caches,
    get_app_logs,
    get_crash_reports,
    get_dpkg_packages,
    get_file_size,
    get_home_path,
)

DELETE_HELPER = "sysbro-delete-files"

Runner = Callable[[Sequence[str]], int]


class Category(IntEnum):
    """Kinds of reclaimable data."""

    PACKAGE_CACHE = 0
    CRASH_REPORTS = 1
    APPLICATION_LOGS = 2
    APPLICATION_CACHES = 3
    BASHSHELL_HISTORY = 4
    TRASH = 5


class CleanupError(Exception):
    """Raised when the selected files could not be deleted."""


@dataclass
class ScanEntry:
    """A single file or directory found by a scan."""

    path: Path
    size: int
    checked: bool = False

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def size_text(self) -> str:
        return format_bytes(self.size)


@dataclass
class ScanGroup:
    """Found entries of one category, with their combined size."""

    category: Category
    title: str
    entries: list[ScanEntry] = field(default_factory=list)
    size: int = 0
    directory: Path | None = None
    checked: bool = False
    show_count: bool = True

    @property
    def label(self) -> str:
        """The title, followed by the number of entries where they are listed."""
        if self.show_count:
            return f"{self.title} ({len(self.entries)})"
        return self.title

    @property
    def size_text(self) -> str:
        return format_bytes(self.size)

    def set_checked(self, checked: bool) -> None:
        """Check or uncheck the group and every entry in it."""
        self.checked = checked
        for entry in self.entries:
            entry.checked = checked


@dataclass
class ScanResult:
    """Outcome of a scan: groups in display order and their total size."""

    groups: list[ScanGroup] = field(default_factory=list)
    total_size: int = 0

    def __iter__(self) -> Iterator[ScanGroup]:
        return iter(self.groups)

    def __len__(self) -> int:
        return len(self.groups)

    @property
    def total_text(self) -> str:
        return format_bytes(self.total_size)


def _run_command(command: Sequence[str]) -> int:
    try:
        return subprocess.run(list(command), check=False).returncode
    except OSError as exc:
        raise CleanupError(f"cannot run {command[0]}: {exc}") from exc


def _make_group(
    category: Category,
    title: str,
    paths: Iterable[Path],
    with_children: bool = True,
) -> ScanGroup:
    paths = list(paths)
    group = ScanGroup(category=category, title=title, show_count=with_children)
    if paths:
        group.directory = paths[0].absolute().parent
    if with_children:
        group.entries = [ScanEntry(path.absolute(), get_file_size(path)) for path in paths]
        group.size = sum(entry.size for entry in group.entries)
    elif paths:
        group.size = get_file_size(paths[0])
    return group


class Scanner:
    """Finds caches, logs, crash reports and package archives, and removes them."""

    def __init__(
        self,
        home: str | os.PathLike | None = None,
        *,
        log_dir: str | os.PathLike = "/var/log",
        crash_dir: str | os.PathLike = "/var/crash",
        package_dir: str | os.PathLike = "/var/cache/apt/archives",
        runner: Runner | None = None,
    ) -> None:
        self.home = Path(home) if home is not None else Path(get_home_path())
        self.log_dir = Path(log_dir)
        self.crash_dir = Path(crash_dir)
        self.package_dir = Path(package_dir)
        self._runner = runner if runner is not None else _run_command

    def scan(self) -> ScanResult:
        """Collect every category of reclaimable data."""
        groups = [
            _make_group(Category.APPLICATION_CACHES, "Application Caches", get_app_caches(self.home)),
            _make_group(Category.APPLICATION_LOGS, "Application Log", get_app_logs(self.log_dir)),
            _make_group(Category.CRASH_REPORTS, "Crash Reports", get_crash_reports(self.crash_dir)),
            _make_group(Category.PACKAGE_CACHE, "Package Caches", get_dpkg_packages(self.package_dir)),
        ]
        history = self.home / ".bash_history"
        if history.exists():
            groups.append(
                _make_group(Category.BASHSHELL_HISTORY, "Shell Terminal History", [history])
            )
        return ScanResult(groups=groups, total_size=sum(group.size for group in groups))

    def clean(self, result: ScanResult) -> int:
        """Delete the checked entries of ``result`` and return the bytes freed.

        On success every group is emptied. Raises CleanupError if the
        privileged deletion fails; the result is then left untouched.
        """
        to_delete: list[str] = []
        for group in result.groups:
            if group.category is Category.TRASH:
                if group.checked:
                    self._empty_trash()
                continue
            to_delete.extend(str(entry.path) for entry in group.entries if entry.checked)

        if not to_delete:
            return 0

        freed = sum(get_file_size(path) for path in to_delete)
        exit_code = self._runner(["pkexec", DELETE_HELPER, *to_delete])
        if exit_code != 0:
            raise CleanupError(f"{DELETE_HELPER} exited with status {exit_code}")

        for group in result.groups:
            group.entries.clear()
        return freed

    def _empty_trash(self) -> None:
        trash = self.home / ".local" / "share" / "Trash"
        for sub in ("files", "info"):
            shutil.rmtree(trash / sub, ignore_errors=True)