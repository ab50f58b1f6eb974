[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "visioncortex"
version = "0.8.8"
description = "Semantic computer vision: binary and color image clustering, bounding rectangles and geometry helpers"
requires-python = ">=3.10"
dependencies = []
keywords = ["computer-vision", "computer-graphics", "clustering", "image-processing", "union-find"]
classifiers = [
    "Development Status :: 4 - Beta",
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
    "Topic :: Multimedia :: Graphics",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["visioncortex"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
