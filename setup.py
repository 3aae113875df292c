import os

from setuptools import setup, find_packages

# Set up the package
setup(
    name="fast-wavelet",
    version="0.1.0",
    author="Scott Friedman and Project Contributors",
    author_email="",
    description="1-D Fast Wavelet Transform with pluggable wavelet kernels",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["fast_wavelet", "fast_wavelet.*"]),
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.19.0",
        "pywavelets>=1.1.0",
        "matplotlib>=3.3.0",
    ],
    extras_require={
        "dev": ["pytest"],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: POSIX :: Linux",
        "Operating System :: MacOS :: MacOS X",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
)
