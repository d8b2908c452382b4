#!/usr/bin/env python3
"""
Setup script for Northstar Dev Testing Helper
"""

from setuptools import setup, find_packages

# Read the README file
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Read requirements
with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="northstar-dev-helper",
    version="0.6.0",
    author="GeckoEidechse",
    description="Apply in-progress Northstar pull request builds to a Titanfall 2 install for testing",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/GeckoEidechse/northstar_dev_testing_helper_tool",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Games/Entertainment",
        "Topic :: Software Development :: Testing",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.8",
    install_requires=requirements,
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "northstar-dev-helper=northstar_dev_helper.main:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
