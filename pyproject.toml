[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "superwav"
version = "0.1.0"
description = "Wave field synthesis, convolution helpers and a start-time server for synchronised multi-speaker audio playback"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "audio",
    "wave field synthesis",
    "wfs",
    "convolution",
    "overlap-add",
    "overlap-save",
    "spatial audio",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
superwav-server = "superwav.server:main"
superwav-wfs = "superwav.wfs:main"
superwav-benchmark = "superwav.benchmark:main"
superwav-convolution = "superwav.convolution:main"
superwav-messages = "superwav.messages:main"
superwav-config = "superwav.configfile:main"
superwav-settings = "superwav.settings:main"

[tool.hatch.build.targets.wheel]
packages = ["superwav"]

[tool.hatch.build.targets.sdist]
include = [
    "superwav",
    "tests",
    "pyproject.toml",
]

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
