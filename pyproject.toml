[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "nftmarket"
version = "0.1.0"
description = "In-memory NFT registry and marketplace state machine with series, lending, listings and commission-based sales."
requires-python = ">=3.10"
dependencies = []
keywords = ["nft", "marketplace", "ledger", "series", "commission"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Office/Business :: Financial",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["nftmarket"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
