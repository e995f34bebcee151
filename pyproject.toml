[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tinyreactor"
version = "0.1.0"
description = "A small single-threaded reactor for TCP servers: event loop, channels, buffered connections and a worker pool"
requires-python = ">=3.10"
dependencies = []
keywords = ["reactor", "event loop", "tcp", "server", "selectors", "networking", "echo"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
tinyreactor-echo = "tinyreactor.echo_server:main"
tinyreactor-compute = "tinyreactor.compute_server:main"
tinyreactor-basic = "tinyreactor.basic:main"

[tool.hatch.build.targets.wheel]
packages = ["tinyreactor"]

[tool.hatch.build.targets.sdist]
include = ["tinyreactor", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
