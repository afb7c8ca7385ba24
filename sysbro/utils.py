"""System information helpers: /proc parsing, size formatting and directory listings."""

from __future__ import annotations

import logging
import os
import platform
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

log = logging.getLogger(__name__)

_UNITS = ("B", "KB", "MB", "GB", "TB")
_PSEUDO_PARENTS = ("/dev", "/proc", "/sys", "/var/run", "/var/lock")
_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")
_BOOT_TIME = re.compile(r"\s=.*s")


@dataclass(frozen=True)
class CpuTime:
    """Aggregate CPU jiffies: time spent working and time overall."""

    work: int
    total: int


class CommandError(Exception):
    """Raised when an external command cannot be run to completion."""


def format_bytes(num_bytes: int) -> str:
    """Format a byte count with one decimal and a unit, up to terabytes."""
    value = int(num_bytes)
    if value < 0:
        raise ValueError(f"byte count must not be negative: {value}")
    scaled = value
    for exponent, unit in enumerate(_UNITS):
        if scaled < 1024:
            return f"{value / 1024 ** exponent:.1f}{unit}"
        scaled //= 1024
    return ""


def get_file_content(path: str | os.PathLike) -> str:
    """Return the text of a file, or an empty string if it cannot be read."""
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""


def get_user_name() -> str:
    """Return the login name from the environment."""
    return os.environ.get("USER") or os.environ.get("USERNAME") or ""


def get_platform() -> str:
    """Return the kernel type and CPU architecture, e.g. ``linux x86_64``."""
    return f"{platform.system().lower()} {platform.machine()}"


def get_distribution() -> str:
    """Return the pretty name of the running distribution."""
    try:
        pretty = platform.freedesktop_os_release().get("PRETTY_NAME")
    except OSError:
        pretty = None
    return pretty or f"{platform.system()} {platform.release()}"


def get_kernel() -> str:
    """Return the kernel release."""
    return platform.release()


def parse_boot_time(output: str) -> str:
    """Extract the total startup time from ``systemd-analyze`` output."""
    first_line = output.split("\n", 1)[0]
    match = _BOOT_TIME.search(first_line)
    return match.group(0).replace(" = ", "") if match else ""


def get_boot_time() -> str:
    """Return the time the last boot took, as reported by systemd."""
    try:
        proc = subprocess.run(
            ["systemd-analyze"], capture_output=True, text=True, check=False
        )
    except OSError:
        return ""
    return parse_boot_time(proc.stdout)


def get_debian_version(path: str | os.PathLike = "/etc/debian_version") -> str:
    """Return the contents of the Debian version file, or an empty string."""
    return get_file_content(path)


def get_cpu_info(path: str | os.PathLike = "/proc/cpuinfo") -> tuple[str, int]:
    """Return the CPU model name and the number of processors."""
    lines = Path(path).read_text().splitlines()
    models = [line for line in lines if line.startswith("model name")]
    if not models:
        raise ValueError(f"no model name in {path}")
    model = models[0].split(":")[1].strip()
    cores = sum(1 for line in lines if line.startswith("processor"))
    return model, cores


def get_cpu_time(path: str | os.PathLike = "/proc/stat") -> CpuTime:
    """Read the aggregate CPU line of /proc/stat."""
    for line in Path(path).read_text().splitlines():
        if line.startswith("cpu "):
            fields = line.split()
            if len(fields) < 9:
                raise ValueError(f"short cpu line in {path}: {line!r}")
            user, nice, system, idle, iowait, irq, softirq, steal = (
                int(field) for field in fields[1:9]
            )
            work = user + nice + system
            return CpuTime(work, work + idle + iowait + irq + softirq + steal)
    raise ValueError(f"no aggregate cpu line in {path}")


def get_memory_info(path: str | os.PathLike = "/proc/meminfo") -> tuple[str, float]:
    """Return a ``used / total`` memory string and the used percentage."""
    wanted = {"MemTotal", "MemAvailable", "SwapTotal", "SwapFree"}
    values: dict[str, int] = {}
    for line in Path(path).read_text().splitlines():
        fields = line.split()
        if len(fields) >= 2 and fields[0].rstrip(":") in wanted:
            values[fields[0].rstrip(":")] = int(fields[1])
    try:
        total = values["MemTotal"]
        available = values["MemAvailable"]
    except KeyError as exc:
        raise ValueError(f"missing {exc.args[0]} in {path}") from None
    used = total - available
    text = f"{format_bytes(used * 1024)} / {format_bytes(total * 1024)}"
    percent = used * 100.0 / total if total else 0.0
    return text, percent


def _unescape_mount_field(field: str) -> str:
    return _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), field)


def _is_parent_of(parent: str, path: str) -> bool:
    return path == parent or path.startswith(parent + "/")


def _is_pseudo_fs(device: str, mount_point: str, fs_type: str) -> bool:
    if any(_is_parent_of(parent, mount_point) for parent in _PSEUDO_PARENTS):
        return True
    if fs_type == "tmpfs":
        return False
    if fs_type in ("rootfs", "rpc_pipefs"):
        return True
    return not device.startswith("/")


def get_disk_info(mounts_path: str | os.PathLike = "/proc/mounts") -> tuple[str, float]:
    """Sum usage over mounted real devices, counting each device once."""
    total_size = total_free = 0
    seen: set[str] = set()
    for line in Path(mounts_path).read_text().splitlines():
        fields = line.split()
        if len(fields) < 3:
            continue
        device, mount_point, fs_type = (_unescape_mount_field(f) for f in fields[:3])
        if device in seen or _is_pseudo_fs(device, mount_point, fs_type):
            continue
        try:
            stat = os.statvfs(mount_point)
        except OSError:
            continue
        seen.add(device)
        total_size += stat.f_blocks * stat.f_frsize
        total_free += stat.f_bfree * stat.f_frsize
    used = total_size - total_free
    text = f"{format_bytes(used)} / {format_bytes(total_size)}"
    percent = used * 100.0 / total_size if total_size else 0.0
    return text, percent


def get_network_bandwidth(path: str | os.PathLike = "/proc/net/dev") -> tuple[int, int]:
    """Return total received and sent bytes over all non-loopback interfaces."""
    received = sent = 0
    for line in Path(path).read_text().splitlines()[2:]:
        fields = line.split()
        if not fields or fields[0] == "lo:":
            continue
        received += int(fields[1])
        sent += int(fields[9])
    return received, sent


def get_file_size(path: str | os.PathLike) -> int:
    """Return the size of a file, or of all visible files below a directory."""
    if os.path.isfile(path):
        return os.path.getsize(path)
    if not os.path.isdir(path):
        return 0
    try:
        with os.scandir(path) as entries:
            children = [entry.path for entry in entries if not entry.name.startswith(".")]
    except OSError:
        return 0
    return sum(get_file_size(child) for child in children)


def _list_entries(directory: str | os.PathLike, include_dirs: bool) -> list[Path]:
    root = Path(directory)
    if not root.is_dir():
        return []
    try:
        candidates: Iterable[Path] = list(root.iterdir())
    except OSError:
        return []
    entries = [
        entry
        for entry in candidates
        if not entry.name.startswith(".")
        and (entry.is_file() or (include_dirs and entry.is_dir()))
    ]
    return sorted(entries, key=lambda entry: entry.name.lower())


def get_dpkg_packages(directory: str | os.PathLike = "/var/cache/apt/archives") -> list[Path]:
    """List downloaded package archives."""
    return _list_entries(directory, include_dirs=False)


def get_crash_reports(directory: str | os.PathLike = "/var/crash") -> list[Path]:
    """List crash report files."""
    return _list_entries(directory, include_dirs=False)


def get_app_logs(directory: str | os.PathLike = "/var/log") -> list[Path]:
    """List log files and log directories."""
    return _list_entries(directory, include_dirs=True)


def get_app_caches(home: str | os.PathLike | None = None) -> list[Path]:
    """List entries of the user's cache directory."""
    base = Path(home) if home is not None else Path(get_home_path())
    return _list_entries(base / ".cache", include_dirs=True)


def get_home_path() -> str:
    """Return the user's home directory."""
    return str(Path.home())


def _exec(cmd: str, args: Iterable[str] = (), timeout: float = 30.0) -> str:
    try:
        proc = subprocess.run(
            [cmd, *args], capture_output=True, text=True, timeout=timeout, check=False
        )
    except (OSError, subprocess.TimeoutExpired) as exc:
        raise CommandError(str(exc)) from exc
    return proc.stdout.strip()


def sudo_exec(cmd: str, args: Iterable[str] = ()) -> str:
    """Run a command through pkexec and return its trimmed output, or '' on failure."""
    try:
        return _exec("pkexec", [cmd, *args])
    except CommandError as exc:
        log.error("privileged command %s failed: %s", cmd, exc)
        return ""


def get_task_id_list(proc_root: str | os.PathLike = "/proc") -> list[int]:
    """Return the ids of all running processes."""
    root = Path(proc_root)
    try:
        names = [entry.name for entry in root.iterdir() if entry.is_dir()]
    except OSError:
        return []
    return sorted(int(name) for name in names if name.isdigit())