[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "monocommander"
version = "0.1.0"
description = "Node operator toolkit: RPC probes, redacting command runner, systemd unit generation and Mesh/Rosetta sidecar management"
requires-python = ">=3.10"
keywords = ["cosmos", "cometbft", "evm", "rosetta", "systemd", "node-operator"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["monocommander"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
