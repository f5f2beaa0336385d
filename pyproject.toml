[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "softraster"
version = "0.1.0"
description = "A small software rasterizer: MVP transforms, wireframe line drawing and supersampled triangle filling"
requires-python = ">=3.10"
keywords = ["rasterizer", "graphics", "rendering", "bresenham", "ssaa", "software-renderer"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
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
softraster = "softraster.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["softraster"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
