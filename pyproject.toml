[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "visionlab"
version = "0.1.0"
description = "Hand-written colour transforms, white balance, gamma and vignette correction, k-means colour segmentation and background subtraction for images and video"
requires-python = ">=3.10"
keywords = [
    "image-processing",
    "color",
    "hsv",
    "yuv",
    "kmeans",
    "gamma",
    "white-balance",
    "vignette",
    "background-subtraction",
    "gmm",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Education",
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
dependencies = [
    "numpy",
    "scipy",
    "imageio",
    "matplotlib",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
visionlab-color = "visionlab.color_cli:main"
visionlab-camera = "visionlab.video:main"
visionlab-framediff = "visionlab.segment_cli:main_frame_diff"
visionlab-gmm = "visionlab.segment_cli:main_gmm"

[tool.hatch.build.targets.wheel]
packages = ["visionlab"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
