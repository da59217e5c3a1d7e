[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spherewars"
version = "0.1.0"
description = "Authoritative UDP game server, client networking and seeded maze generation for a multiplayer sphere arena shooter"
requires-python = ">=3.10"
dependencies = []
keywords = ["game", "multiplayer", "udp", "maze", "shooter", "server", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Games/Entertainment :: First Person Shooters",
    "Topic :: Internet",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[project.scripts]
spherewars-server = "spherewars.serve:main"

[tool.hatch.build.targets.wheel]
packages = ["spherewars"]

[tool.pytest.ini_options]
addopts = "-ra"
