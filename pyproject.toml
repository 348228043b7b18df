[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cerbotor"
version = "1.0.4"
description = "Certify model checking witnesses for circuits in the BTOR2 format"
requires-python = ">=3.10"
dependencies = []
keywords = ["btor2", "model checking", "witness", "certification", "hardware verification"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Electronic Design Automation (EDA)",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cerbotor = "cerbotor.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["cerbotor"]

[tool.pytest.ini_options]
addopts = "-ra"
