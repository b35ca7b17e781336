[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "visiontools"
version = "0.1.0"
description = "Image processing routines for grayscale images: contours, contrast, FAST corners, distance transforms and BRIEF descriptors."
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = [
    "image processing",
    "computer vision",
    "contours",
    "corners",
    "distance transform",
    "brief",
    "histogram",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
    "hypothesis",
]

[tool.hatch.build.targets.wheel]
packages = ["visiontools"]

[tool.pytest.ini_options]
addopts = "-ra"
