from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="sdxmap",
    version="0.3.0",
    description="Network topology snapshots as geographic site maps.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"sdxmap.schemas": ["*.json"]},
    python_requires=">=3.11",
    install_requires=[
        "jsonschema",
        "networkx",
        "pandas",
        "pyyaml",
        "requests",
    ],
    extras_require={"dev": ["pytest"]},
    tests_require=["pytest"],
    entry_points={"console_scripts": ["sdxmap=sdxmap.cli:main"]},
)
