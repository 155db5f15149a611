"""
Setup configuration for complaint-pipeline
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read the contents of README file
this_directory = Path(__file__).parent
long_description = (this_directory / "README.md").read_text(encoding="utf-8")

# Read version from package
version = {}
with open(this_directory / "src/complaint_pipeline/_version.py") as f:
    exec(f.read(), version)

setup(
    name="complaint-pipeline",
    version=version["__version__"],
    description="Reconciles complaint, allegation, penalty and officer tables into an analysis-ready feature table",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package configuration
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,

    # Python version requirement
    python_requires=">=3.8,<4.0",

    # Core dependencies
    install_requires=[
        "pandas>=2.0",
        "numpy>=1.24",
        "pydantic>=1.10",
        "typer>=0.9.0",
        "psutil>=5.9",
    ],

    # Optional dependencies
    extras_require={
        "dev": [
            "pytest>=7.4",
            "pytest-cov>=4.1",
        ],
    },

    # CLI entry points
    entry_points={
        "console_scripts": [
            "complaint-pipeline=complaint_pipeline.cli:main",
        ],
    },

    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Information Analysis",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],

    keywords=[
        "data-pipeline",
        "pandas",
        "data-cleaning",
        "civilian-complaints",
    ],
)
