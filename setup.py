from setuptools import setup, find_packages
from pathlib import Path
from os import path

here = path.abspath(path.dirname(__file__))
with open(path.join(here, "README.rst"), encoding="utf-8") as f:
    long_description = f.read()

setup(
    name="nnls-torch",
    version="0.1.0",
    description="A PyTorch implementation of Non-negative Least Squares solvers.",
    long_description=long_description,
    author="nnls-torch developers",
    classifiers=[  # https://pypi.python.org/pypi?%3Aaction=list_classifiers
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows :: Windows 10",
        "Operating System :: POSIX :: Linux",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    keywords="non-negative least squares",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        l.strip() for l in Path(path.join(here, "requirements.txt")).read_text("utf-8").splitlines() if l.strip()
    ],
    extras_require={
        "test": ["pytest", "termcolor", "threadpoolctl"],
    },
    python_requires=">=3.8",
)
