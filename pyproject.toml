[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "starfish"
version = "1.0.0"
description = "Transaction metadata, wire protocol codec and extension points for a distributed transaction coordinator"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "distributed-transactions",
    "two-phase-commit",
    "transaction-coordinator",
    "rpc",
    "protocol",
    "codec",
]
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
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["starfish"]

[tool.hatch.build.targets.sdist]
include = ["starfish", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
