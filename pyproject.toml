[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "lsbsteg"
version = "0.1.0"
description = "Least-significant-bit image steganography for strings, files and images"
requires-python = ">=3.10"
keywords = ["steganography", "lsb", "image", "hiding", "bitmap"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
lsbsteg = "lsbsteg.app:main"

[tool.hatch.build.targets.wheel]
packages = ["lsbsteg"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
