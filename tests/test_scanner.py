from pathlib import Path

import pytest

from sysbro.scanner import (
    Category,
    CleanupError,
    ScanEntry,
    ScanGroup,
    ScanResult,
    Scanner,
)


def _write(path: Path, size: int) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"x" * size)
    return path


@pytest.fixture
def layout(tmp_path):
    home = tmp_path / "home"
    _write(home / ".cache" / "a.bin", 100)
    _write(home / ".cache" / "sub" / "b.bin", 50)
    _write(home / ".cache" / ".hidden", 7)
    logs = tmp_path / "log"
    _write(logs / "syslog", 30)
    crash = tmp_path / "crash"
    crash.mkdir()
    packages = tmp_path / "archives"
    _write(packages / "pkg.deb", 200)
    (packages / "partial").mkdir()
    return home, logs, crash, packages


class _Recorder:
    def __init__(self, exit_code=0):
        self.exit_code = exit_code
        self.calls = []

    def __call__(self, command):
        self.calls.append(list(command))
        return self.exit_code


def _scanner(layout, runner=None):
    home, logs, crash, packages = layout
    return Scanner(home, log_dir=logs, crash_dir=crash, package_dir=packages, runner=runner)


def test_scan_group_order_and_labels(layout):
    result = _scanner(layout).scan()
    assert [g.category for g in result] == [
        Category.APPLICATION_CACHES,
        Category.APPLICATION_LOGS,
        Category.CRASH_REPORTS,
        Category.PACKAGE_CACHE,
    ]
    assert result.groups[0].label == "Application Caches (2)"
    assert result.groups[2].label == "Crash Reports (0)"


def test_scan_sizes(layout):
    result = _scanner(layout).scan()
    caches = result.groups[0]
    assert {e.name: e.size for e in caches.entries} == {"a.bin": 100, "sub": 50}
    assert caches.size == 150
    assert result.groups[3].size == 200
    assert result.total_size == sum(g.size for g in result)


def test_scan_records_directory(layout):
    home = layout[0]
    result = _scanner(layout).scan()
    assert result.groups[0].directory == (home / ".cache").absolute()
    assert result.groups[2].directory is None


def test_bash_history_group(layout):
    home = layout[0]
    assert len(_scanner(layout).scan()) == 4
    _write(home / ".bash_history", 12)
    result = _scanner(layout).scan()
    history = result.groups[-1]
    assert history.category is Category.BASHSHELL_HISTORY
    assert history.label == "Shell Terminal History (1)"
    assert history.size == 12


def test_set_checked_propagates():
    group = ScanGroup(
        Category.CRASH_REPORTS,
        "Crash Reports",
        entries=[ScanEntry(Path("/a"), 1), ScanEntry(Path("/b"), 2)],
    )
    group.set_checked(True)
    assert group.checked and all(e.checked for e in group.entries)
    group.set_checked(False)
    assert not any(e.checked for e in group.entries)


def test_clean_deletes_checked(layout):
    runner = _Recorder()
    scanner = _scanner(layout, runner)
    result = scanner.scan()
    result.groups[0].set_checked(True)
    freed = scanner.clean(result)
    assert freed == 150
    assert len(runner.calls) == 1
    command = runner.calls[0]
    assert command[:2] == ["pkexec", "sysbro-delete-files"]
    assert sorted(Path(p).name for p in command[2:]) == ["a.bin", "sub"]
    assert all(not g.entries for g in result)


def test_clean_nothing_checked(layout):
    runner = _Recorder()
    scanner = _scanner(layout, runner)
    result = scanner.scan()
    assert scanner.clean(result) == 0
    assert runner.calls == []
    assert len(result.groups[0].entries) == 2


def test_clean_failure_raises_and_keeps_entries(layout):
    scanner = _scanner(layout, _Recorder(exit_code=1))
    result = scanner.scan()
    result.groups[3].set_checked(True)
    with pytest.raises(CleanupError):
        scanner.clean(result)
    assert len(result.groups[3].entries) == 1


def test_clean_trash(tmp_path):
    home = tmp_path / "home"
    trash = home / ".local" / "share" / "Trash"
    _write(trash / "files" / "old.txt", 5)
    _write(trash / "info" / "old.txt.trashinfo", 5)
    runner = _Recorder()
    scanner = Scanner(home, runner=runner)
    group = ScanGroup(Category.TRASH, "Trash", show_count=False, checked=True)
    assert group.label == "Trash"
    assert scanner.clean(ScanResult(groups=[group])) == 0
    assert not (trash / "files").exists()
    assert not (trash / "info").exists()
    assert runner.calls == []


def test_unchecked_trash_kept(tmp_path):
    home = tmp_path / "home"
    kept = _write(home / ".local" / "share" / "Trash" / "files" / "old.txt", 5)
    scanner = Scanner(home, runner=_Recorder())
    scanner.clean(ScanResult(groups=[ScanGroup(Category.TRASH, "Trash")]))
    assert kept.exists()