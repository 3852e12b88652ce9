[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pulsarkit"
version = "0.1.0"
description = "Building blocks for a message-broker client: wire buffers, batch framing, compression, topic names, routing, lookup and auth."
requires-python = ">=3.10"
keywords = ["pulsar", "messaging", "pubsub", "protocol", "compression", "routing"]
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
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "lz4",
    "zstandard",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["pulsarkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
