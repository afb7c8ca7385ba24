"""Listing systemd services that start at boot and switching them on or off."""

from __future__ import annotations

import re
import subprocess
from dataclasses import dataclass
from typing import Callable, Iterator, Sequence

UNKNOWN_DESCRIPTION = "Unknown"
HEADERS = ("Service Name", "Status")
LIST_COMMAND = (
    "systemctl",
    "list-unit-files",
    "-t",
    "service",
    "-a",
    "--state=enabled,disabled",
)

_SERVICE_LINE = re.compile(r"[^@].service")
_DESCRIPTION_LINE = re.compile(r"^Description")
_STATUS_LABELS = {True: "Enabled", False: "Disabled"}

Runner = Callable[[Sequence[str]], "subprocess.CompletedProcess[str]"]


class ServiceError(Exception):
    """Raised when a service command cannot be run or fails."""


@dataclass
class ServiceItem:
    """A service unit with its description and whether it is enabled."""

    name: str
    description: str = UNKNOWN_DESCRIPTION
    status: bool = False

    @property
    def status_text(self) -> str:
        return status_label(self.status)


def status_label(status: bool) -> str:
    """Return the label shown for an enabled or disabled service."""
    label = _STATUS_LABELS[bool(status)]
    return label


def parse_unit_files(output: str) -> list[tuple[str, bool]]:
    """Parse ``systemctl list-unit-files`` output into (name, enabled) pairs.

    Template units (``name@.service``) and lines that are not unit entries
    are skipped; the state is read from the last column.
    """
    services = []
    for line in output.split("\n"):
        if not _SERVICE_LINE.search(line):
            continue
        fields = line.split()
        if not fields:
            continue
        name = fields[0].replace(".service", "")
        services.append((name, fields[-1] == "enabled"))
    return services


def parse_description(output: str) -> str:
    """Return the Description value from ``systemctl cat`` output."""
    for line in output.split("\n"):
        if _DESCRIPTION_LINE.search(line):
            return line.split("=")[-1]
    return UNKNOWN_DESCRIPTION


def _run(command: Sequence[str]) -> "subprocess.CompletedProcess[str]":
    try:
        return subprocess.run(list(command), capture_output=True, text=True, check=False)
    except OSError as exc:
        raise ServiceError(f"cannot run {command[0]}: {exc}") from exc


class ServiceModel:
    """The set of enabled and disabled services, in the order systemd lists them."""

    def __init__(
        self,
        *,
        runner: Runner | None = None,
        on_count_changed: Callable[[int], object] | None = None,
    ) -> None:
        self._runner = runner if runner is not None else _run
        self._on_count_changed = on_count_changed
        self.items: list[ServiceItem] = []

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[ServiceItem]:
        return iter(self.items)

    def __getitem__(self, name: str) -> ServiceItem:
        for item in self.items:
            if item.name == name:
                return item
        raise KeyError(name)

    def load(self) -> list[ServiceItem]:
        """Query systemd for the services and their descriptions."""
        output = self._runner(list(LIST_COMMAND)).stdout or ""
        self.items = [
            ServiceItem(name, self.get_description(name), status)
            for name, status in parse_unit_files(output)
        ]
        self._notify()
        return self.items

    def get_description(self, name: str) -> str:
        """Return the description of a unit, or 'Unknown'."""
        try:
            output = self._runner(["systemctl", "cat", name]).stdout or ""
        except ServiceError:
            return UNKNOWN_DESCRIPTION
        return parse_description(output)

    def switch_status(self, name: str) -> bool:
        """Enable a disabled service or disable an enabled one; return the new state.

        Raises KeyError for an unknown service and ServiceError if the
        privileged command fails, in which case nothing is changed.
        """
        new_status = not self[name].status
        action = "enable" if new_status else "disable"
        result = self._runner(["pkexec", "systemctl", action, name])
        failed = result.returncode != 0
        if not failed:
            for item in self.items:
                if item.name == name:
                    item.status = new_status
        self._notify()
        if failed:
            raise ServiceError(f"systemctl {action} {name} exited with status {result.returncode}")
        return new_status

    def enabled_count(self) -> int:
        """Return how many services are enabled."""
        return sum(1 for item in self.items if item.status)

    def _notify(self) -> None:
        if self._on_count_changed is not None:
            self._on_count_changed(self.enabled_count())