import threading
import time

import pytest

from sysbro.monitor import Monitor, Snapshot, cpu_percent
from sysbro.utils import (
    CpuTime,
    format_bytes,
    get_disk_info,
    get_memory_info,
    get_task_id_list,
)

NET_HEADER = (
    "Inter-|   Receive |  Transmit\n"
    " face |bytes packets|bytes packets\n"
)


def _net(recv, send):
    return (
        NET_HEADER
        + "    lo: 900 1 0 0 0 0 0 0 900 1 0 0 0 0 0 0\n"
        + f"  eth0: {recv} 1 0 0 0 0 0 0 {send} 1 0 0 0 0 0 0\n"
    )


@pytest.fixture
def sysfiles(tmp_path):
    stat = tmp_path / "stat"
    stat.write_text("cpu  100 0 0 300 0 0 0 0 0 0\n")
    meminfo = tmp_path / "meminfo"
    meminfo.write_text(
        "MemTotal: 4096 kB\nMemAvailable: 1024 kB\nSwapTotal: 0 kB\nSwapFree: 0 kB\n"
    )
    net = tmp_path / "net"
    net.write_text(_net(1000, 2000))
    mounts = tmp_path / "mounts"
    mounts.write_text(f"/dev/fake0 {str(tmp_path).replace(' ', chr(92) + '040')} ext4 rw 0 0\n")
    proc = tmp_path / "proc"
    proc.mkdir()
    for pid in ("1", "2"):
        (proc / pid).mkdir()
    return {
        "stat_path": stat,
        "meminfo_path": meminfo,
        "net_path": net,
        "mounts_path": mounts,
        "proc_root": proc,
    }


def test_cpu_percent_half_busy():
    assert cpu_percent(CpuTime(100, 400), CpuTime(150, 500)) == 50.0


def test_cpu_percent_without_elapsed_time():
    assert cpu_percent(CpuTime(10, 40), CpuTime(10, 40)) == 0.0


def test_invalid_interval():
    with pytest.raises(ValueError):
        Monitor(0)


def test_sample_measures_rates(sysfiles):
    slept = []

    def fake_sleep(seconds):
        slept.append(seconds)
        sysfiles["stat_path"].write_text("cpu  150 0 0 350 0 0 0 0 0 0\n")
        sysfiles["net_path"].write_text(_net(1000 + 1024, 2000 + 2048))

    monitor = Monitor(1, sleep=fake_sleep, **sysfiles)
    snapshot = monitor.sample()

    assert slept == [1]
    assert snapshot.cpu_percent == 50.0
    assert snapshot.upload_speed == format_bytes(2048)
    assert snapshot.download_speed == format_bytes(1024)
    assert snapshot.upload_total == format_bytes(2000 + 2048)
    assert snapshot.download_total == format_bytes(1000 + 1024)
    assert snapshot.process_count == len(get_task_id_list(sysfiles["proc_root"])) + 1
    assert (snapshot.memory, snapshot.memory_percent) == get_memory_info(sysfiles["meminfo_path"])
    assert snapshot.disk == get_disk_info(sysfiles["mounts_path"])[0]


def test_sample_interval_divides_speed(sysfiles):
    def fake_sleep(seconds):
        sysfiles["net_path"].write_text(_net(1000, 2000 + 4096))

    snapshot = Monitor(2, sleep=fake_sleep, **sysfiles).sample()
    assert snapshot.upload_speed == format_bytes(4096 // 2)
    assert snapshot.download_speed == format_bytes(0)


def test_snapshots_generator(sysfiles):
    monitor = Monitor(1, sleep=lambda seconds: None, **sysfiles)
    stream = monitor.snapshots()
    first, second = next(stream), next(stream)
    assert first == second
    assert first.cpu_percent == cpu_percent(CpuTime(100, 400), CpuTime(100, 400))


def test_start_and_stop(sysfiles):
    monitor = Monitor(0.01, **sysfiles)
    received: list[Snapshot] = []
    got = threading.Event()

    def callback(snapshot):
        received.append(snapshot)
        got.set()

    monitor.start(callback)
    assert got.wait(timeout=5)
    monitor.stop()

    count = len(received)
    time.sleep(0.1)
    assert len(received) == count
    assert received[0].process_count == len(get_task_id_list(sysfiles["proc_root"])) + 1