"""
Setup script for contextual-fsrs.

Contextual FSRS is a spaced-repetition scheduling engine. After each review it
updates a card's difficulty, stability and retrievability using:

1. Core FSRS dynamics - Rating-driven stability growth and forgetting curve
2. Session context - Fatigue, cognitive load, time of day, device conditions
3. A memo cache - Category-partitioned TTL/LRU memoization of DSR updates

The 'fsrs-engine' command inspects single reviews from JSON snapshots.
"""

from setuptools import find_packages, setup

setup(
    name="contextual-fsrs",
    version="1.0.0",
    description="Context-aware FSRS difficulty/stability/retrievability engine with a memo cache",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["contextual_fsrs", "contextual_fsrs.*"]),
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "fsrs-engine=contextual_fsrs.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="spaced-repetition fsrs scheduling memory cache",
)
