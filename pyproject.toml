[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "traefik7"
version = "0.1.0"
description = "Convert load balancer L7 command configurations into Traefik service definitions and IP:port mappings"
requires-python = ">=3.10"
keywords = ["traefik", "load-balancer", "configuration", "migration", "yaml"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: Proxy Servers",
    "Topic :: System :: Systems Administration",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
traefik7 = "traefik7.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["traefik7"]

[tool.pytest.ini_options]
addopts = "-ra"
