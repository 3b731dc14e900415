[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgvalue"
version = "10.11.0"
description = "Encode Python values as PostgreSQL literals and decode PostgreSQL text-format values"
requires-python = ">=3.10"
dependencies = []
keywords = ["postgresql", "sql", "literal", "array", "hstore", "bytea", "encoding", "decoding"]
classifiers = [
    "Development Status :: 5 - Production/Stable",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pgvalue"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
