"""The catalogue of companion tools and launching them."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from typing import Callable, Iterator

CHINESE_LOCALE = "zh_CN"

_TOOL_KEYS = (
    "sysbro-startup-apps",
    "sysbro-file-shredder",
    "sysbro-network-test",
    "sysbro-express",
)
_TOOL_NAMES = {
    "sysbro-startup-apps": "App start-up management",
    "sysbro-file-shredder": "File Shredder",
    "sysbro-network-test": "网速测试",
    "sysbro-express": "快递查询助手",
}
_CHINESE_ONLY = frozenset({"sysbro-network-test", "sysbro-express"})


@dataclass(frozen=True)
class Tool:
    """A companion program: the executable it runs and the name shown for it."""

    key: str
    name: str


def _system_locale_name() -> str:
    for variable in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(variable)
        if value:
            return value.split(".", 1)[0].split("@", 1)[0]
    return "C"


def available_tools(locale_name: str | None = None) -> list[Tool]:
    """Return the tools offered for a locale, in display order.

    Some tools exist only in Chinese and are offered only under ``zh_CN``.
    Without a locale the one from the environment is used.
    """
    if locale_name is None:
        locale_name = _system_locale_name()
    return [
        Tool(key, _TOOL_NAMES[key])
        for key in _TOOL_KEYS
        if locale_name == CHINESE_LOCALE or key not in _CHINESE_ONLY
    ]


def launch_tool(key: str) -> int:
    """Start a tool detached from this process and return its process id.

    Raises OSError if the program cannot be started.
    """
    process = subprocess.Popen(
        [key],
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
    return process.pid


class ToolsModel:
    """The tools on offer and which of them is currently highlighted."""

    def __init__(
        self,
        locale_name: str | None = None,
        *,
        on_changed: Callable[[str | None], object] | None = None,
    ) -> None:
        self.tools = available_tools(locale_name)
        self.current: str | None = None
        self._on_changed = on_changed

    def __len__(self) -> int:
        return len(self.tools)

    def __iter__(self) -> Iterator[Tool]:
        return iter(self.tools)

    def __getitem__(self, index: int) -> Tool:
        return self.tools[index]

    def __contains__(self, key: object) -> bool:
        return any(tool.key == key for tool in self.tools)

    def set_current(self, key: str | None) -> None:
        """Highlight the tool with ``key``; ``None`` clears the highlight."""
        if key is not None and key not in self:
            raise KeyError(key)
        self.current = key
        if self._on_changed is not None:
            self._on_changed(key)

    def is_current(self, key: str) -> bool:
        """Tell whether the tool with ``key`` is highlighted."""
        return self.current is not None and key == self.current