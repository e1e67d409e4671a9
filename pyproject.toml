[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minilsm"
version = "0.1.0"
description = "A small log-structured merge-tree storage engine: memtables, merge iterators, blocks and sorted string tables."
requires-python = ">=3.10"
dependencies = [
    "sortedcontainers",
]
keywords = ["lsm", "lsm-tree", "key-value", "storage", "memtable", "sstable"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Database :: Database Engines/Servers",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
minilsm-demo = "minilsm.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["minilsm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
