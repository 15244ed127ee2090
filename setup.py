import pathlib
import sys

from setuptools import find_packages, setup


__copyright__ = "Copyright 2024-date, The probkit Project"
__license__ = "BSD-3"
__status__ = "Production"

# Check Python version, no point installing if unsupported version inplace
min_version = (3, 11)
if sys.version_info < min_version:
    py_version = ".".join(str(n) for n in sys.version_info)
    msg = (
        f"Python-{'.'.join(map(str, min_version))} or greater is required, "
        f"Python-{py_version} used."
    )
    raise RuntimeError(msg)


short_description = "Beta, Gaussian and Uniform distribution functions"

root = pathlib.Path(__file__).parent

long_description = (root / "README.md").read_text()

PACKAGE_DIR = "src"


def _get_version():
    version_file = root / PACKAGE_DIR / "probkit" / "_version.py"
    for line in version_file.read_text().splitlines():
        if line.startswith("__version__"):
            return line.split("=")[1].strip().strip("\"'")
    raise RuntimeError(f"no __version__ in {version_file}")


PROJECT_URLS = {
    "Bug Tracker": "https://github.com/probkit/probkit/issues",
    "Source Code": "https://github.com/probkit/probkit",
}

setup(
    name="probkit",
    version=_get_version(),
    url="https://github.com/probkit/probkit",
    description=short_description,
    long_description=long_description,
    long_description_content_type="text/markdown",
    platforms=["any"],
    license=__license__,
    keywords=[
        "statistics",
        "probability",
        "beta distribution",
        "incomplete beta",
        "quantile",
    ],
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: BSD License",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
    ],
    python_requires=">=3.11",
    packages=find_packages(where=PACKAGE_DIR),
    package_dir={"": PACKAGE_DIR},
    install_requires=[
        "numpy",
        "scipy",
        "scitrack",
        "tqdm",
    ],
    extras_require={
        "test": [
            "nox",
            "pytest",
            "pytest-cov",
        ],
        "dev": [
            "black",
            "isort",
            "nox",
            "pytest",
            "pytest-cov",
        ],
    },
    project_urls=PROJECT_URLS,
)
