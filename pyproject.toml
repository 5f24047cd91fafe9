[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "echokit"
version = "0.1.0"
description = "Small TCP echo and greeting servers with matching command-line clients"
requires-python = ">=3.10"
dependencies = []
keywords = ["tcp", "echo", "socket", "server", "client", "networking"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Networking",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
echokit-server = "echokit.servers:main"
echokit-client = "echokit.clients:main"

[tool.hatch.build.targets.wheel]
packages = ["echokit"]

[tool.pytest.ini_options]
addopts = "-ra"
