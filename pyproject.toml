[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "kmdiff"
version = "1.1.0"
description = "Differential k-mer analysis between control and case cohorts"
requires-python = ">=3.10"
dependencies = []
keywords = ["k-mer", "genomics", "gwas", "differential analysis", "bioinformatics"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
kmdiff = "kmdiff.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["kmdiff"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
