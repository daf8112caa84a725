from setuptools import setup, find_packages

setup(
    name="scratchfs",
    version="1.0.0",
    description="Small filesystem utility layer: directory helpers and atomic file writes",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "PyYAML>=6.0",
        "rich>=12.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
)
