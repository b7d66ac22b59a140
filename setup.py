#!/usr/bin/env python3
"""vpsdeploy CLI - Setup"""

from setuptools import setup, find_packages

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="vpsdeploy",
    version="1.0.0",
    description="Deploy Dockerized git repositories to a single Linux host over SSH",
    author="vpsdeploy Team",
    packages=find_packages(include=["vpsdeploy", "vpsdeploy.*"]),
    package_data={"vpsdeploy": ["templates/*.j2"]},
    install_requires=requirements,
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "vpsdeploy=vpsdeploy.main:main",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
)
