[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "skyroster"
version = "0.1.0"
description = "Keyboard-driven terminal airline booking system for planes, flights, seats and passengers, stored as plain text files"
requires-python = ">=3.10"
dependencies = []
keywords = ["airline", "booking", "flights", "reservations", "seats", "terminal", "avl-tree"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Natural Language :: English",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Office/Business :: Scheduling",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
skyroster = "skyroster.app:main"

[tool.setuptools.packages.find]
include = ["skyroster*"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
