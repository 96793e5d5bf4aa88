#!/usr/bin/env python3
"""
Setup script for the UK police attendance model selection project

Install in development mode:
    pip install -e .[dev]

This allows importing from anywhere:
    from config.paths import BRONZE, SILVER, GOLD
    from accident_modeling.selection import tune
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read requirements
requirements_file = Path(__file__).parent / "requirements.txt"
with open(requirements_file) as f:
    # Filter out duplicates and empty lines
    requirements = []
    seen = set()
    for line in f:
        line = line.strip()
        if line and not line.startswith('#'):
            # Extract package name (before ==, >=, etc.)
            pkg_name = line.split('==')[0].split('>=')[0].split('<=')[0].split('<')[0].split('>')[0].strip()
            if pkg_name not in seen:
                requirements.append(line)
                seen.add(pkg_name)

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
with open(readme_file, encoding='utf-8') as f:
    long_description = f.read()

setup(
    name="uk-police-attendance",
    version="1.0.0",
    description="Cross-validated model selection for police attendance at UK road accidents",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',
    install_requires=requirements,
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'accident-build=data_engineering.datasets.build_accident_dataset:main',
            'accident-report=accident_modeling.run_report:main',
        ],
    },
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
    ],
)
