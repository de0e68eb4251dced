[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "procvisor"
version = "0.7.3"
description = "A process supervisor library: start, restart, stop, signal and report on long-running programs"
requires-python = ">=3.10"
dependencies = []
keywords = ["supervisor", "process", "daemon", "process-control", "signals"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Operating System :: MacOS",
    "Operating System :: Microsoft :: Windows",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["procvisor"]

[tool.pytest.ini_options]
addopts = "-ra"
