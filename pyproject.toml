[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clubdesk"
version = "0.1.0"
description = "Request handling for a programming club's back office: members, approvals, announcements, contests, events and teams, stored in SQLite."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "club",
    "membership",
    "announcements",
    "contests",
    "events",
    "teams",
    "otp",
    "sqlite",
]
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
    "Topic :: Internet :: WWW/HTTP :: Dynamic Content",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["clubdesk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
