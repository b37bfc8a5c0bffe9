[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mdu"
version = "0.1.0"
description = "Multi-Decoder-Update (MDU) protocol: checksums, packet builders, bit timing, decoder-side receivers and a symbol encoder"
requires-python = ">=3.10"
dependencies = [
    "pycryptodome",
]
keywords = [
    "mdu",
    "multi-decoder-update",
    "model railway",
    "decoder",
    "firmware update",
    "crc8",
    "crc32",
    "salsa20",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Embedded Systems",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mdu"]

[tool.hatch.build.targets.sdist]
include = [
    "mdu",
    "tests",
]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
