[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "consolex2pre"
version = "0.1.0"
description = "A stereo console preamp channel strip: tape saturation, four-band EQ, dynamics, filters and fader, with metering."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "audio",
    "dsp",
    "console",
    "preamp",
    "equalizer",
    "compressor",
    "gate",
    "saturation",
    "mixing",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Sound/Audio :: Mixers",
    "Topic :: Multimedia :: Sound/Audio :: Analysis",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
consolex2pre = "consolex2pre.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["consolex2pre"]

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
warn_unused_ignores = true
warn_redundant_casts = true
