# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="treeforge",
    version="1.0.0",
    description="Convert tree diagrams into real directory structures and zip archives, and back",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["treeforge*"]),
    python_requires=">=3.8",
    install_requires=[
        "requests",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "treeforge=treeforge.interface.cli.app:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
