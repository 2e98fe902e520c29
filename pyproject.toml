[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "msfvm"
version = "0.1.0"
description = "Finite volume building blocks for 2D scalar conservation laws and the Euler equations"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["finite volume", "cfd", "euler equations", "conservation laws", "mesh", "limiter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
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
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["msfvm"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
