from setuptools import setup, find_packages


with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="netroute",
    version="0.1.0",
    author="Andrey Golovanov",
    description="Shortest-path queries over a weighted directed graph, served over UDP.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/networmix/netroute",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"netroute.schemas": ["*.json"]},
    python_requires=">=3.9",
    install_requires=["networkx>=3.0", "pyyaml>=6.0", "jsonschema>=4.0"],
    extras_require={"dev": ["pytest"]},
    tests_require=["pytest"],
    entry_points={"console_scripts": ["netroute=netroute.cli:main"]},
)
