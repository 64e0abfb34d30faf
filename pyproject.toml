[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sectorkit"
version = "0.1.0"
description = "A small sector-based file system, block device layer and PC device models"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "filesystem",
    "block-device",
    "inode",
    "partition-table",
    "mbr",
    "free-map",
    "emulation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
    "Topic :: System :: Emulators",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sectorkit-insult = "sectorkit.insult:main"
sectorkit-tools = "sectorkit.tools:main"

[tool.hatch.build.targets.wheel]
packages = ["sectorkit"]

[tool.hatch.build.targets.sdist]
include = ["sectorkit", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
