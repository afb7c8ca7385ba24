[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sysbro"
version = "1.0.0"
description = "A command-line system assistant for Linux: resource statistics, disk cleanup and startup service management."
requires-python = ">=3.10"
dependencies = []
keywords = ["system", "monitor", "cleaner", "systemd", "services", "linux", "proc"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sysbro = "sysbro.app:main"

[tool.hatch.build.targets.wheel]
packages = ["sysbro"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
