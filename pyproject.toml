[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "acidstore"
version = "0.1.0"
description = "Building blocks for secure, deduplicated, transactional storage over pluggable data stores"
requires-python = ">=3.10"
keywords = ["storage", "deduplication", "encryption", "compression", "chunking", "locking"]
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
    "Topic :: Database",
    "Topic :: Security :: Cryptography",
    "Topic :: System :: Archiving",
]
dependencies = [
    "lz4",
    "pynacl",
    "msgpack",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["acidstore"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
