# Copyright 2025 Lawrence Livermore National Security, LLC
# See the top-level LICENSE file for details.
#
# SPDX-License-Identifier: MIT

from setuptools import find_packages, setup

setup(
    name="surveyor",
    version="0.1.0",
    description="Catalogs the software packages in container images and filesystem trees into an SBOM",
    license="MIT",
    python_requires=">=3.8",
    packages=find_packages(include=["surveyor", "surveyor.*"]),
    install_requires=[
        "click>=8.0",
        "dataclasses-json>=0.6",
        "loguru",
        "networkx>=2.6",
        "packageurl-python>=0.11",
        "packaging>=21.0",
        "pluggy>=1.0",
        "pydantic>=2.5",
        "tomlkit>=0.11",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "surveyor=surveyor.__main__:main",
        ],
    },
)
