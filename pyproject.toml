[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bayesfilters"
version = "0.10.0"
description = "Recursive Bayesian estimation: Kalman filters, particle filters and the models they run on"
requires-python = ">=3.10"
keywords = [
    "bayesian filtering",
    "kalman filter",
    "particle filter",
    "state estimation",
    "resampling",
    "sequential importance sampling",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["bayesfilters"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
