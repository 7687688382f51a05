[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "proxyreenc"
version = "0.1.0"
description = "Pairing-based proxy re-encryption with a cloud server, a data owner and a data user over TCP"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "proxy re-encryption",
    "pairing",
    "bilinear map",
    "tate pairing",
    "cryptography",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
proxyreenc-server = "proxyreenc.server:main"
proxyreenc-owner = "proxyreenc.owner:main"
proxyreenc-user = "proxyreenc.user:main"

[tool.hatch.build.targets.wheel]
packages = ["proxyreenc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
