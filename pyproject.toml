[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rouille"
version = "3.6.2"
description = "Request and response objects, routing, sessions, error bodies, a reverse-proxy client and websocket frame parsing for HTTP handlers."
requires-python = ">=3.10"
dependencies = []
keywords = ["web", "framework", "http", "rest", "websocket", "router", "proxy"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rouille"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
