#!/usr/bin/env python3
"""
Setup configuration for lrclib-fetcher
Fetches synchronized lyrics from LRCLIB for a local music collection
"""

from setuptools import setup, find_packages

# Read README for long description
with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Core requirements (always installed)
core_requirements = [
    "mutagen>=1.47.0",
    "click>=8.1.7",
    "pyyaml>=6.0.1",
    "requests>=2.31.0",
    "tqdm>=4.66.1",
    "colorama>=0.4.6",
    "python-dotenv>=1.0.0",
]

setup(
    name="lrclib-fetcher",
    version="0.9.0",
    author="lrclib-fetcher contributors",
    description="Fetch synchronized lyrics from LRCLIB for your local music files",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/leshicodes/lrclib-fetcher",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
    ],
    python_requires=">=3.10",
    install_requires=core_requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.3",
        ],
    },
    entry_points={
        "console_scripts": [
            "lrclib-fetch=lrclib_fetcher.main:cli",
        ],
    },
    keywords="lyrics lrc lrclib synced music cli",
    project_urls={
        "Bug Reports": "https://github.com/leshicodes/lrclib-fetcher/issues",
        "Source": "https://github.com/leshicodes/lrclib-fetcher",
    },
)
