"""
Setup script for cvmat

cvmat is pure Python on top of numpy and the opencv-python wheels, so
no native build step is needed:
1. Packages are discovered under src/
2. The version is read from src/cvmat/__init__.py
3. pytest is available through the ``test`` extra
"""

from pathlib import Path
from setuptools import setup, find_packages


# Read version from src/cvmat/__init__.py
def get_version():
    version_file = Path("src/cvmat/__init__.py")
    if version_file.exists():
        for line in version_file.read_text().splitlines():
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"').strip("'")
    return "0.1.0"


# Read long description from README
def get_long_description():
    readme = Path("README.md")
    if readme.exists():
        return readme.read_text(encoding="utf-8")
    return ""


setup(
    name="cvmat",
    version=get_version(),
    description="Reference-counted, dynamically typed matrix handles over OpenCV",
    long_description=get_long_description(),
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "opencv-python",
    ],
    extras_require={
        "test": ["pytest"],
    },
    zip_safe=True,
)
