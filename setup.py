from setuptools import setup, find_packages

setup(
    name="igc-inspector",
    version="1.0.0",
    description="IGC Inspector - Parses, validates and summarises IGC flight recorder logs",
    author="Juan Luis Gabriel",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=[
        "aerofiles",  # For IGC file writing
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'igc-inspector=igc_inspector.ui.cli:main',
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Scientific/Engineering :: GIS",
        "Environment :: Console",
        "Operating System :: OS Independent",
    ],
)
