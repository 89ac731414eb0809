[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bilisync"
version = "2.1.2"
description = "Building blocks for keeping a local media library in step with bilibili: download status, safe file names, NFO metadata and a SQLite state store"
requires-python = ">=3.10"
keywords = ["bilibili", "sync", "video", "nfo", "media-library", "downloader", "sqlite"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Video",
]
dependencies = [
    "requests>=2.31",
]

[project.optional-dependencies]
test = [
    "pytest>=7.4",
    "pytest-asyncio>=0.23",
    "responses>=0.24",
]

[tool.hatch.build.targets.wheel]
packages = ["bilisync"]

[tool.hatch.build.targets.sdist]
include = ["bilisync", "tests"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
