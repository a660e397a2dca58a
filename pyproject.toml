[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "riffctl"
version = "0.1.0"
description = "Installation checks, shell completion scripts and Markdown docs for a Kubernetes workload platform CLI"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "cli", "doctor", "completion", "kubectl"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
riffctl = "riffctl.commands:main"

[tool.hatch.build.targets.wheel]
packages = ["riffctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
