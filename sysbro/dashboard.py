"""Text rendering of the home dashboard: gauges, system info and live statistics."""

from __future__ import annotations

from dataclasses import dataclass

from sysbro.monitor import Snapshot
from sysbro.utils import (
    get_boot_time,
    get_cpu_info,
    get_distribution,
    get_kernel,
    get_platform,
)

CPU_IDLE = "CPU Idle"
CPU_BUSY = "CPU Busy"
DEFAULT_COLOR = "#2CA7F8"
MEMORY_COLOR = "#18BD9B"
DISK_COLOR = "#6F5BEC"

_BAR_WIDTH = 20


def format_percent(value: float) -> str:
    """Format a percentage with one decimal, e.g. ``42.0%``."""
    return f"{float(value):.1f}%"


def cpu_tips(percent: float, previous: str = CPU_IDLE) -> str:
    """Return the CPU load hint for ``percent``.

    Below 50 the CPU is idle, from 50 up to 100 it is busy; at exactly 0 or
    at 100 and above the previous hint is kept.
    """
    if 0 < percent < 50:
        return CPU_IDLE
    if 50 <= percent < 100:
        return CPU_BUSY
    return previous


@dataclass
class Gauge:
    """A circular percentage gauge with a title, a colour and a hint line."""

    title: str = ""
    color: str = DEFAULT_COLOR
    tips: str = ""
    value: float = 0.0
    min_value: float = 0.0
    max_value: float = 100.0

    def __post_init__(self) -> None:
        if self.max_value <= self.min_value:
            raise ValueError(
                f"max_value ({self.max_value}) must exceed min_value ({self.min_value})"
            )

    def set_value(self, value: float) -> None:
        """Set the value the gauge shows."""
        self.value = float(value)

    @property
    def arc_length(self) -> float:
        """Degrees of the arc drawn for the current value."""
        return 360.0 / (self.max_value - self.min_value) * (self.value - self.min_value)

    @property
    def percent_text(self) -> str:
        return format_percent(self.value)

    def render(self) -> str:
        """Return the gauge as lines of text: title, bar with percentage, hint."""
        span = self.max_value - self.min_value
        fraction = min(1.0, max(0.0, (self.value - self.min_value) / span))
        filled = round(fraction * _BAR_WIDTH)
        bar = "#" * filled + "." * (_BAR_WIDTH - filled)
        lines = [self.title, f"[{bar}] {self.percent_text}"]
        if self.tips:
            lines.append(self.tips)
        return "\n".join(lines)


def render_system_info() -> str:
    """Return the static system information block."""
    try:
        cpu_model, cpu_cores = get_cpu_info()
        cores_text = str(cpu_cores)
    except (OSError, ValueError, IndexError):
        cpu_model, cores_text = "", ""
    lines = [
        "SYSTEM INFO",
        f"Platform: {get_platform()}",
        f"Distribution: {get_distribution()}",
        f"Startup time: {get_boot_time()}",
        f"Kernel Release: {get_kernel()}",
        f"CPU Model: {cpu_model}",
        f"CPU Core: {cores_text}",
    ]
    return "\n".join(lines)


def render_snapshot(snapshot: Snapshot) -> str:
    """Return gauges, network and process lines for one round of statistics."""
    cpu = Gauge(title="CPU", tips=cpu_tips(snapshot.cpu_percent))
    cpu.set_value(snapshot.cpu_percent)

    memory = Gauge(title="MEMORY", color=MEMORY_COLOR, tips=snapshot.memory)
    memory.set_value(snapshot.memory_percent)

    disk = Gauge(title="DISK", color=DISK_COLOR, tips=snapshot.disk)
    disk.set_value(snapshot.disk_percent)

    network = "\n".join(
        [
            "NETWORK",
            f"upload: {snapshot.upload_speed}/s  total {snapshot.upload_total}",
            f"download: {snapshot.download_speed}/s  total {snapshot.download_total}",
        ]
    )
    process = "\n".join(
        ["PROCESS", f"{snapshot.process_count} processes are running"]
    )
    return "\n\n".join([cpu.render(), memory.render(), disk.render(), network, process])