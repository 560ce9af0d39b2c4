[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sfntedit"
version = "0.1.0"
description = "Read, edit and write TrueType font tables and Embedded OpenType containers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "font",
    "truetype",
    "ttf",
    "sfnt",
    "eot",
    "cmap",
    "glyf",
    "kern",
    "subset",
]
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
    "Topic :: Text Processing :: Fonts",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["sfntedit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
