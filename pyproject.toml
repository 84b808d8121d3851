[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fsh"
version = "0.1.0"
description = "A small interactive shell with for loops, if/else, sequences, pipelines and redirections"
requires-python = ">=3.10"
dependencies = []
keywords = ["shell", "command-line", "interpreter", "repl"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Shells",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
fsh = "fsh.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["fsh"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
