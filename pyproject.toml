[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ordwallet"
version = "0.1.0"
description = "Bitcoin primitives, ordinal transaction-building errors and an in-memory mock chain state"
requires-python = ">=3.10"
dependencies = []
keywords = ["bitcoin", "ordinals", "inscriptions", "transactions", "segwit", "bech32", "mock"]
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
    "Topic :: Office/Business :: Financial",
    "Topic :: Software Development :: Testing :: Mocking",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["ordwallet"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
