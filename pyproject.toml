[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bras_collector"
version = "1.0.0"
description = "Session tracking, signalling parsing and record types for a BRAS traffic collector"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "bras",
    "radius",
    "pppoe",
    "http",
    "tcp",
    "rtp",
    "traffic",
    "dcs",
    "network-monitoring",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Telecommunications Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bras_collector"]

[tool.hatch.build.targets.sdist]
include = ["bras_collector", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
