# sysbro

A command-line system assistant for Linux.

- Shows system information and live CPU, memory, disk, network and process statistics.
- Finds application caches, logs, crash reports, package archives and shell history
  that take up disk space. It can delete them.
- Lists the systemd services that are enabled or disabled at startup. It can switch one
  on or off.
- Lists a few companion tools and starts them.

Statistics are read from `/proc`. Service data comes from `systemctl`. Privileged actions go
through `pkexec`.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command line

```
sysbro [--config PATH] [--version] COMMAND ...
```

With no command, `sysbro` behaves like `sysbro home`.

### home

```
sysbro home [--count N] [--interval SECONDS]
```

First prints the system information: platform, distribution, startup time, kernel release,
CPU model and core count. Then it prints `N` rounds of statistics, one every `SECONDS`.
The defaults are one round and 2 seconds. `--count 0` keeps going until you press Ctrl-C.

Each round shows:

- CPU, memory and disk gauges with their percentages.
- Upload and download speed, with the totals.
- The number of running processes.

### clean

```
sysbro clean [--home DIR] [-v] [--delete]
```

Scans these locations and prints each group with its size:

- `~/.cache`
- `/var/log`
- `/var/crash`
- `/var/cache/apt/archives`
- `~/.bash_history`

`-v` also lists every entry. `--home` scans a different home directory. `--delete` selects
everything found and deletes it. Deletion runs `pkexec sysbro-delete-files PATH...`.

### services

```
sysbro services [--toggle NAME]
```

Prints how many services are enabled, followed by every enabled or disabled service with its
state and description. `--toggle NAME` first enables a disabled service, or disables an
enabled one, through `pkexec systemctl`.

### tools

```
sysbro tools [--locale NAME] [--launch KEY]
```

Lists the companion tools by key and name. Some tools are offered only under the `zh_CN`
locale. Without `--locale`, the locale is taken from `LC_ALL`, `LC_MESSAGES` or `LANG`.
`--launch KEY` starts a tool in its own session.

### tray

```
sysbro tray [--toggle]
```

Shows the "display tray icon" setting. `--toggle` switches it and saves it.

Settings are kept in `$XDG_CONFIG_HOME/sysbro.conf`, or `~/.config/sysbro.conf` when that
variable is not set. `--config` names another file.

## Library use

Format a byte count the way the dashboard shows it:

```python
from sysbro.utils import format_bytes

format_bytes(1536)   # "1.5KB"
```

Take one reading of the system. `sample()` waits one interval to measure rates:

```python
from sysbro.monitor import Monitor

snapshot = Monitor(interval=2.0).sample()
print(snapshot.cpu_percent, snapshot.memory, snapshot.process_count)
```

`Monitor.snapshots()` yields readings without end. `Monitor.start(callback)` passes each
`Snapshot` to `callback` from a background thread. `Monitor.stop()` ends that thread.
`sysbro.dashboard.render_snapshot` turns a snapshot into the text that `sysbro home` prints.

Scan for files that can be cleaned up, pick some, then remove them:

```python
from sysbro.scanner import Scanner

scanner = Scanner()
result = scanner.scan()
for group in result:
    group.set_checked(True)
freed = scanner.clean(result)   # bytes freed
```

A `CleanupError` is raised if the privileged deletion fails.

List startup services and switch one:

```python
from sysbro.services import ServiceModel

model = ServiceModel()
model.load()
print(model.enabled_count())
model.switch_status("cups")   # returns the new state
```

A `ServiceError` is raised when the command fails. A `KeyError` is raised for an unknown
service.

The companion tools for a locale come from `sysbro.tools.available_tools(locale_name)`.
`sysbro.tools.launch_tool(key)` starts one and returns its process id.

## What it does not do

- There is no graphical window and no tray icon. `sysbro tray` only stores the setting.
- The `sysbro-delete-files` helper that `clean --delete` runs is not part of this package.
  It must be installed separately.
- The companion tools are not part of this package either. `sysbro tools --launch` only starts
  programs of those names if they are installed.