[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "filequery"
version = "0.1.0"
description = "Query trees, matching and highlighting for file name and path search"
requires-python = ">=3.10"
dependencies = []
keywords = ["search", "query", "files", "filesystem", "wildcard", "regex", "highlight"]
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
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["filequery"]

[tool.pytest.ini_options]
addopts = "-ra"
