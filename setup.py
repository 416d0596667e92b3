"""Packaging for hogpyramid.

Pure Python: the numeric kernels are vectorized numpy, and resampling uses
OpenCV's prebuilt wheels, so no extension modules are compiled.
"""

from setuptools import setup, find_packages


setup(
    name="hogpyramid",
    version="0.1.0",
    description="Multi-scale HOG feature pyramids and strided part-filter responses",
    python_requires=">=3.8",
    packages=find_packages(include=["hogpyramid", "hogpyramid.*"]),
    install_requires=[
        "numpy>=1.20",
        "opencv-python-headless>=4.5",
    ],
    extras_require={
        "test": ["pytest>=7"],
    },
)
