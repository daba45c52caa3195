"""
Setup script for adaptive-tutor.

Adaptive Tutor is the mastery-gated content and grading engine behind a
subject -> module -> lesson -> quiz tutoring platform. It serves three roles:

1. Content Resolver - Lazily generates shared module lessons and quizzes
2. Mastery Grader - Grades MCQ and sandboxed coding answers against a 90% bar
3. Remediation - Builds per-student remedial lessons when a quiz is failed

The 'tutor' command is the administrative entry point.
"""

from setuptools import find_packages, setup

setup(
    name="adaptive-tutor",
    version="1.0.0",
    description="Mastery-gated adaptive content and grading engine",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    author="Adaptive Tutor",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Database
        "sqlalchemy>=2.0.0",
        "psycopg2-binary>=2.9.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # HTTP
        "httpx>=0.25.0",
        # Content generation
        "google-generativeai>=0.5.0",
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
            "tutor=adaptive_tutor.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
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
    keywords="learning mastery adaptive tutoring quiz education",
)
