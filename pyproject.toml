[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mpix"
version = "0.1.0"
description = "Pure-Python pixel processing for raw camera frames: debayering, colour corrections, kernels, resizing and QOI encoding"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "image",
    "pixel",
    "camera",
    "bayer",
    "debayer",
    "demosaic",
    "gamma",
    "convolution",
    "qoi",
    "isp",
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
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["mpix"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
