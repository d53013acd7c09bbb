#!/usr/bin/env python3
"""
Kody Programming Language
A small interpreted scripting language with exact rational arithmetic.
"""

from setuptools import setup, find_packages
import os
import re
import sys

# Ensure Python 3.8+
if sys.version_info < (3, 8):
    raise RuntimeError("Kody requires Python 3.8 or later")

# Read version from __init__.py
here = os.path.abspath(os.path.dirname(__file__))
version_file = os.path.join(here, "kody", "__init__.py")
version = "0.1.0"
if os.path.exists(version_file):
    with open(version_file, encoding="utf-8") as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.MULTILINE)
        if match:
            version = match.group(1)

# Read README
readme_file = os.path.join(here, "README.md")
long_description = ""
if os.path.exists(readme_file):
    with open(readme_file, "r", encoding="utf-8") as f:
        long_description = f.read()

setup(
    name="kody",
    version=version,
    description="A small interpreted scripting language with exact rational arithmetic",
    long_description=long_description,
    long_description_content_type="text/markdown",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        # The interpreter has no external dependencies
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "kody=kody.cli:main",
        ],
    },
    classifiers=[
        "Development Status :: 2 - Pre-Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Interpreters",
    ],
    keywords=["programming-language", "interpreter", "scripting", "rational-numbers"],
    zip_safe=False,
)
