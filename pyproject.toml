[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lrlex"
version = "0.1.0"
description = "A lex-style lexer: load .l rule files, lex input by longest match, and generate token modules"
requires-python = ">=3.10"
dependencies = []
keywords = ["lexer", "lex", "tokenizer", "compiler", "parsing"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Compilers",
    "Topic :: Text Processing :: General",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
lrlex = "lrlex.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["lrlex"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
