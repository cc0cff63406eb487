[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "zkasper"
version = "1.0.0"
description = "Building blocks for Casper FFG finality checks on the Ethereum beacon chain: consensus state transitions, committee shuffling, attestation indices and chain parameters."
requires-python = ">=3.10"
dependencies = []
keywords = ["ethereum", "beacon-chain", "casper", "ffg", "finality", "consensus", "attestation", "shuffling"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["zkasper"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
