[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gatebrawl"
version = "0.1.0"
description = "A small side-scrolling brawler: fight enemies across platforms, use gates to travel between floors, and save progress to SQLite."
requires-python = ">=3.10"
dependencies = [
    "pygame",
]
keywords = ["game", "brawler", "platformer", "side-scroller", "pygame", "sqlite"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: MacOS X",
    "Environment :: Win32 (MS Windows)",
    "Environment :: X11 Applications",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment :: Side-Scrolling/Arcade Games",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gatebrawl = "gatebrawl.app:main"

[tool.hatch.build.targets.wheel]
packages = ["gatebrawl"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
