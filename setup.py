"""
Setup configuration for dwm-msg.

Command-line client for the dwm window manager IPC socket.
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read long description from README if it exists
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text() if readme_file.exists() else ""

setup(
    name="dwm-msg",
    version="1.0.0",
    description="Send IPC messages to the dwm window manager and monitor its events",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["dwm_msg", "dwm_msg.*"]),
    install_requires=[
        "click>=8.0",
        "rich",
        "pydantic>=2.0",
    ],
    python_requires=">=3.11",
    entry_points={
        "console_scripts": [
            "dwm-msg=dwm_msg.__main__:cli",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: X11 Applications",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
