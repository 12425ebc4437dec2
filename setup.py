#!/usr/bin/env python3
"""Setup script for the javalsp package."""

import os

from setuptools import find_packages, setup

# Read version from the package
with open("javalsp/__init__.py") as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split("=")[1].strip().strip('"').strip("'")
            break
    else:
        version = "0.0.0"

# Read long description from README
long_description = ""
if os.path.exists("README.md"):
    with open("README.md") as f:
        long_description = f.read()

setup(
    name="javalsp",
    version=version,
    description="Installer and launcher for the Eclipse JDT language server",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "httpx>=0.24.0",
        "pydantic>=2.0.0",
        "click>=8.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "javalsp=javalsp.cli:main",
            "javalsp-serve=javalsp.service:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.11.4",
)
