# SPDX-FileCopyrightText: 2020 Lukas Schrangl <lukas.schrangl@tuwien.ac.at>
#
# SPDX-License-Identifier: BSD-3-Clause

from setuptools import setup, find_packages


setup(
    name="palmsim",
    version="1.0.0",
    description="Simulation of single particle tracking PALM experiments",
    python_requires=">=3.9",
    install_requires=["numpy>=1.10",
                      "pandas",
                      "tables",
                      "scipy>0.18",
                      "tifffile>=0.14.0",
                      "pyyaml",
                      "matplotlib",
                      "lazy_loader", ],
    extras_require={"test": ["pytest"]},
    packages=find_packages(include=["palmsim*"]),
    entry_points={"console_scripts": ["palmsim=palmsim.__main__:main"]},
)
