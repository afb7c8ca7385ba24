"""Periodic sampling of CPU, memory, disk, network and process statistics."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterator

from sysbro.utils import (
    CpuTime,
    format_bytes,
    get_cpu_time,
    get_disk_info,
    get_memory_info,
    get_network_bandwidth,
    get_task_id_list,
)


@dataclass(frozen=True)
class Snapshot:
    """One round of system statistics."""

    memory: str
    memory_percent: float
    disk: str
    disk_percent: float
    process_count: int
    upload_total: str
    download_total: str
    upload_speed: str
    download_speed: str
    cpu_percent: float


def cpu_percent(previous: CpuTime, current: CpuTime) -> float:
    """Return the share of CPU time spent working between two readings."""
    total = current.total - previous.total
    if total <= 0:
        return 0.0
    return (current.work - previous.work) * 100.0 / total


class Monitor:
    """Samples system statistics, once per call or continuously on a thread."""

    def __init__(
        self,
        interval: float = 2.0,
        *,
        stat_path: str | Path = "/proc/stat",
        meminfo_path: str | Path = "/proc/meminfo",
        net_path: str | Path = "/proc/net/dev",
        mounts_path: str | Path = "/proc/mounts",
        proc_root: str | Path = "/proc",
        sleep: Callable[[float], object] | None = None,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive: {interval}")
        self.interval = interval
        self.stat_path = stat_path
        self.meminfo_path = meminfo_path
        self.net_path = net_path
        self.mounts_path = mounts_path
        self.proc_root = proc_root
        self._stop_event = threading.Event()
        self._sleep = sleep if sleep is not None else self._stop_event.wait
        self._thread: threading.Thread | None = None

    def sample(self) -> Snapshot:
        """Take one snapshot; blocks for one interval to measure rates."""
        memory, memory_percent = get_memory_info(self.meminfo_path)
        disk, disk_percent = get_disk_info(self.mounts_path)
        process_count = len(get_task_id_list(self.proc_root)) + 1

        prev_cpu = get_cpu_time(self.stat_path)
        prev_recv, prev_send = get_network_bandwidth(self.net_path)
        self._sleep(self.interval)
        cur_cpu = get_cpu_time(self.stat_path)
        recv, send = get_network_bandwidth(self.net_path)

        upload = int(max(0, send - prev_send) / self.interval)
        download = int(max(0, recv - prev_recv) / self.interval)

        return Snapshot(
            memory=memory,
            memory_percent=memory_percent,
            disk=disk,
            disk_percent=disk_percent,
            process_count=process_count,
            upload_total=format_bytes(send),
            download_total=format_bytes(recv),
            upload_speed=format_bytes(upload),
            download_speed=format_bytes(download),
            cpu_percent=cpu_percent(prev_cpu, cur_cpu),
        )

    def snapshots(self) -> Iterator[Snapshot]:
        """Yield snapshots without end."""
        while True:
            yield self.sample()

    def start(self, callback: Callable[[Snapshot], object]) -> None:
        """Deliver snapshots to ``callback`` from a background thread."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, args=(callback,), daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Stop the background thread, if any, and wait for it to end."""
        self._stop_event.set()
        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(self, callback: Callable[[Snapshot], object]) -> None:
        while not self._stop_event.is_set():
            snapshot = self.sample()
            if self._stop_event.is_set():
                break
            callback(snapshot)