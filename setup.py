"""
Setup configuration for the Harmony Engine package.

This allows you to install the project with:
    pip install -e .

After installation, you can import modules like:
    from harmony_engine import parse_key, build_diatonic_chords
    from harmony_engine.rules.substitutions import suggest_substitutions
"""

from setuptools import setup, find_packages

# Read the README for long description
with open("README.md", "r", encoding="utf-8") as f:
    long_description = f.read()

setup(
    # -------------------------
    # Basic Package Information
    # -------------------------
    name="harmony-engine",
    version="0.1.0",
    author="Rohan Rajendra Dhanawade",
    author_email="rohan.dhanawade@example.com",  # Update with your email
    description="Music harmony analysis: keys, diatonic chords, substitutions and progression matching",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # -------------------------
    # Package Discovery
    # -------------------------
    packages=find_packages(where=".", exclude=("tests", "tests.*")),
    package_dir={"": "."},

    # The progression dataset ships inside the package
    package_data={"harmony_engine.data": ["progressions.yaml"]},
    include_package_data=True,

    # -------------------------
    # Python Version Requirement
    # -------------------------
    python_requires=">=3.9",

    # -------------------------
    # Dependencies
    # -------------------------
    install_requires=[
        "pydantic>=2.0.0",
        "pyyaml>=6.0",
    ],

    # Optional dependencies (install with pip install -e ".[dev]")
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-cov>=4.1.0",
            "flake8>=6.1.0",
            "black>=23.7.0",
            "mypy>=1.5.0",
        ],
    },

    # -------------------------
    # Entry Points (CLI commands)
    # -------------------------
    entry_points={
        "console_scripts": [
            # This creates a command-line tool: harmony-engine key "F# minor"
            "harmony-engine=harmony_engine.app.cli:main",
        ],
    },

    # -------------------------
    # Metadata
    # -------------------------
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Multimedia :: Sound/Audio :: Analysis",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
    ],
    keywords="music theory, harmony, chord progression, roman numerals, chord substitution, modes",
)
