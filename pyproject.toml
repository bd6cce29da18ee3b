[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gridcalc"
version = "0.1.0"
description = "A terminal spreadsheet with integer cells, formulas, range functions and dependency tracking"
requires-python = ">=3.10"
dependencies = []
keywords = ["spreadsheet", "terminal", "formulas", "cli"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Spreadsheet",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gridcalc = "gridcalc.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gridcalc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
