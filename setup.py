# setup.py

from setuptools import setup, find_packages

setup(
    name="cellsphere",
    version="0.1",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "pyyaml",
        "tqdm",
    ],
    python_requires=">=3.8",
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
        ],
    },
    author="Da Kuang",
    author_email="kuangda@seas.upenn.edu",
    description="Tricube density and redundancy filtering for multi-marker single-cell data",
)
