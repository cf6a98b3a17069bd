"""
Setup script for practice-engine.

Practice Engine is the adaptive scheduler behind the math practice games.
It serves three roles:

1. Concept Scheduler - Picks the next concept with spaced-repetition weighting
2. Progress Store - Persists per-learner, per-subject records
3. Level Tracker - Unlocks levels from aggregate accuracy
"""

from setuptools import find_packages, setup

setup(
    name="practice-engine",
    version="1.0.0",
    description="Adaptive per-learner practice scheduler with level progression",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(include=["practice_engine", "practice_engine.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Database
        "sqlalchemy>=2.0.0",
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
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition adaptive education",
)
