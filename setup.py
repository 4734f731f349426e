from setuptools import setup, find_packages

setup(
    name="heatplan",
    version="0.1.0",
    description="Lowest lifetime cost sizing of domestic heat sources, thermal storage and solar",
    packages=find_packages(include=["heatplan", "heatplan.*"]),
    install_requires=[
        "numpy",
        "pandas",
        "matplotlib",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
