[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "labkit"
version = "0.1.0"
description = "Distributed-systems toolkit: a linearizability checker, an RPC payload encoder and a small MapReduce framework"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "mapreduce",
    "linearizability",
    "distributed-systems",
    "testing",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
labkit-mrsequential = "labkit.mrsequential:main"
labkit-mrmaster = "labkit.mrmaster:main"
labkit-mrworker = "labkit.mrworker:main"

[tool.hatch.build.targets.wheel]
packages = ["labkit"]

[tool.pytest.ini_options]
addopts = "-ra"
