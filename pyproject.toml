[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "inkforge"
version = "0.1.0"
description = "Asset tools for a handheld shooter: map assembler, OBJ model converter, gyro tracking and local-network status helpers"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "3d",
    "obj",
    "wavefront",
    "mesh",
    "vertex-indexing",
    "level-editor",
    "map",
    "gyroscope",
    "game-assets",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
inkforge-mapasm = "inkforge.mapasm:main"
inkforge-objconvert = "inkforge.objconvert:main"

[tool.hatch.build.targets.wheel]
packages = ["inkforge"]

[tool.hatch.build.targets.sdist]
include = ["inkforge", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
