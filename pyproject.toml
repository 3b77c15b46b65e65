[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cpider"
version = "0.1.0"
description = "A small threaded HTTP/1.1 server for static files and a form-record endpoint"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "web server", "static files", "thread pool", "keep-alive"]
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
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cpider = "cpider.server:main"

[tool.hatch.build.targets.wheel]
packages = ["cpider"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
