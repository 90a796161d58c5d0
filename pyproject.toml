[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "devblackbox"
version = "0.1.0"
description = "Reports, contribution heatmaps and work-rhythm summaries for recorded git activity"
requires-python = ">=3.10"
keywords = ["git", "time-tracking", "developer-tools", "productivity", "heatmap", "report"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development",
    "Topic :: Utilities",
]
dependencies = []

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["devblackbox"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
