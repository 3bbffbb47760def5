[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "isingsim"
version = "0.1.0"
description = "Monte Carlo simulation of the two-dimensional Ising model on square and hexagonal lattices"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["ising", "monte-carlo", "metropolis", "wolff", "statistical-physics", "blocking", "jackknife"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
isingsim = "isingsim.simulation:main"

[tool.hatch.build.targets.wheel]
packages = ["isingsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
