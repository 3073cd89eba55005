[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "arqsim"
version = "1.0.0"
description = "Discrete-event network emulator with Go-Back-N and Selective Repeat transport protocols"
requires-python = ">=3.10"
dependencies = []
keywords = ["networking", "simulation", "go-back-n", "selective-repeat", "arq", "transport-layer"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
arqsim = "arqsim.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["arqsim"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
