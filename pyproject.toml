[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mobilegen"
version = "0.1.0"
description = "Xcode project helpers: target tables, version numbers, device list parsing, signing teams and a small template engine for project generation"
requires-python = ">=3.10"
keywords = ["xcode", "ios", "macos", "templates", "build", "mobile"]
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
    "Topic :: Software Development :: Build Tools",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["mobilegen"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
