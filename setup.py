import os

from setuptools import find_packages, setup


# Read README for long description
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), "README.md")
    if os.path.exists(readme_path):
        with open(readme_path, "r", encoding="utf-8") as f:
            return f.read()
    return "Ant trajectory store with refresh reconciliation and interaction linking"


setup(
    name="ant-tracks",
    version="1.0.0",
    description="Frame-by-frame ant trajectories synchronized with a SQLite record store",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    # Package configuration
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "numpy",
        "PySide6",
    ],
    extras_require={
        "test": ["pytest"],
    },
    # Console scripts
    entry_points={
        "console_scripts": [
            "ant-tracks=ant_tracks.app.launcher:main",
        ],
    },
    # Metadata
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Scientific/Engineering",
    ],
    python_requires=">=3.11",
    keywords="ant tracking, trajectories, behavioral analysis, sqlite",
)
