[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mockctl"
version = "0.1.0"
description = "Building blocks for mock expectations: argument matchers, expected calls with counts and ordering, and call sets."
requires-python = ">=3.10"
dependencies = []
keywords = ["mock", "testing", "expectations", "matchers", "test-doubles"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing :: Mocking",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mockctl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
