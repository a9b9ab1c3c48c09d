[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "micromouse"
version = "0.1.0"
description = "Flood-fill maze solving, I2C transaction, wheel encoder and telemetry frame logic for a micromouse robot"
requires-python = ">=3.10"
dependencies = []
keywords = ["micromouse", "maze", "flood-fill", "robotics", "i2c", "encoders", "telemetry"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
micromouse-sim = "micromouse.simulator:main"

[tool.hatch.build.targets.wheel]
packages = ["micromouse"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
