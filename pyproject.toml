[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsmkit"
version = "0.1.0"
description = "Building blocks for an LSM-tree storage engine: an append-only value log, table summaries and byte helpers."
requires-python = ">=3.10"
dependencies = []
keywords = ["lsm", "lsm-tree", "key-value", "storage", "value-log", "sstable"]
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
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["lsmkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
