[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "salvoserver"
version = "0.1.0"
description = "A multiplayer battleship-style TCP game server with a line-based text protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["battleship", "game", "server", "tcp", "multiplayer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Environment :: No Input/Output (Daemon)",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Board Games",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
salvoserver = "salvoserver.server:main"

[tool.hatch.build.targets.wheel]
packages = ["salvoserver"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
