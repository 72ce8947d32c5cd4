[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "retrokit"
version = "1.3.2"
description = "Building blocks for retro side-scrolling game engines: INI config, trig tables, encrypted data archives, input state, palettes, player control, objects and mods"
requires-python = ">=3.10"
dependencies = []
keywords = ["game-engine", "retro", "rsdk", "palette", "archive", "ini", "mods"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["retrokit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
