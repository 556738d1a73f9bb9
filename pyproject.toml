[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "remmux"
version = "0.1.0"
description = "A small remote terminal multiplexer: a line-oriented shell server and a tiled curses client"
requires-python = ">=3.10"
dependencies = []
keywords = ["terminal", "multiplexer", "remote shell", "curses", "tiling"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
remmux-server = "remmux.server:main"
remmux-client = "remmux.client:main"
remmux-shell = "remmux.shell_console:main"

[tool.hatch.build.targets.wheel]
packages = ["remmux"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
