[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "modpackkit"
version = "0.1.0"
description = "Building blocks for managing Minecraft modpacks sourced from CurseForge and Modrinth"
requires-python = ">=3.10"
keywords = ["minecraft", "modpack", "curseforge", "modrinth", "flexver", "murmur2"]
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
    "Topic :: Games/Entertainment",
]
dependencies = []

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["modpackkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
