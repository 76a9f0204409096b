[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "optionpricing"
version = "1.0.0"
description = "Options pricing library: Black-Scholes, barrier, tree, Monte Carlo, Greeks and implied volatility"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "options",
    "black-scholes",
    "greeks",
    "implied-volatility",
    "monte-carlo",
    "binomial-tree",
    "trinomial-tree",
    "barrier-options",
    "derivatives",
    "quantitative-finance",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Financial :: Investment",
    "Topic :: Scientific/Engineering :: Mathematics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
optionpricing = "optionpricing.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["optionpricing"]

[tool.hatch.build.targets.sdist]
include = ["optionpricing", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
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
