# SPDX-FileCopyrightText: 2025 GFZ Helmholtz Centre for Geosciences
#
# SPDX-License-Identifier: Apache-2.0


"""Setup script of the cdf_attrs package."""

from setuptools import find_packages, setup

setup(
    name="cdf_attrs",
    version="0.1.0",
    description="Resolution of sparse, mixed-type global and variable attributes of CDF files.",
    packages=find_packages(include=["cdf_attrs", "cdf_attrs.*"]),
    include_package_data=True,
    python_requires=">=3.11",
    install_requires=[
        "cdflib>=1.0",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
