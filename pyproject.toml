[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "amrdispatch"
version = "0.1.0"
description = "Priority task dispatcher for autonomous mobile robot jobs over TCP, with a terminal monitor"
requires-python = ">=3.10"
dependencies = []
keywords = ["amr", "robot", "dispatcher", "task-queue", "tcp"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Environment :: Console :: Curses",
    "Intended Audience :: Manufacturing",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
amrdispatch-server = "amrdispatch.server:main"
amrdispatch-client = "amrdispatch.client:main"

[tool.hatch.build.targets.wheel]
packages = ["amrdispatch"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
