[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "serialbits"
version = "0.1.0"
description = "Compact binary serialization primitives: byte-order aware adapters, stream adapters, bit-packed value ranges and extensions."
requires-python = ">=3.10"
dependencies = []
keywords = ["serialization", "binary", "bit-packing", "stream", "endianness"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["serialbits"]

[tool.pytest.ini_options]
addopts = "-ra"
