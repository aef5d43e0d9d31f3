[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "specforce"
version = "0.2.2"
description = "Spec-driven development toolkit: adapts AI agent blueprints and reports on project constitution docs"
requires-python = ">=3.10"
keywords = [
    "spec-driven-development",
    "ai-agents",
    "code-generation",
    "blueprints",
    "documentation",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Code Generators",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
specforce = "specforce.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["specforce"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
