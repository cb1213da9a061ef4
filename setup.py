from setuptools import setup, find_packages


setup(
    name="bfs",
    version="0.1",
    packages=find_packages(include=["bfs", "bfs.*"]),
    description="Pack a directory tree into a single BFS archive with per-file compression, and extract it back.",
    author="vercingetorx",
    install_requires=[
        "zstandard>=0.22.0",
    ],
    entry_points={
        "console_scripts": [
            "bfs=bfs.cli:main",
        ]
    },
)
