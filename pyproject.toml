[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pdp10tools"
version = "0.1.0"
description = "Read and write PDP-10 core images, tape images and related file formats"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "pdp-10",
    "its",
    "sblk",
    "pdump",
    "rim10",
    "palx",
    "simh",
    "odt",
    "muddle",
    "cpio",
    "retrocomputing",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats",
    "Topic :: System :: Emulators",
    "Topic :: System :: Archiving",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pdp10-old-cpio = "pdp10tools.oldcpio:main"

[tool.hatch.build.targets.wheel]
packages = ["pdp10tools"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
