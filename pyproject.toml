[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "minios"
version = "0.1.0"
description = "Teaching-sized operating-system pieces (buddy and slab allocators, interrupt dispatch, keyboard, terminal and disk models) with pstree, syscall-time and parallel LCS tools"
requires-python = ">=3.10"
dependencies = []
keywords = ["operating-systems", "allocator", "buddy", "slab", "pstree", "strace", "lcs", "education"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
minios-sperf = "minios.sperf:main"
minios-pstree = "minios.pstree:main"
minios-plcs = "minios.plcs:main"

[tool.hatch.build.targets.wheel]
packages = ["minios"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
