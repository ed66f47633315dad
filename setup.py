#!/usr/bin/env python
"""
Storefront Analytics Setup
"""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

setup(
    name="storefront-analytics",
    version="1.0.0",
    description="Read-only business analytics service for a storefront admin dashboard",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["storefront_analytics", "storefront_analytics.*"]),
    python_requires=">=3.11",
    install_requires=requirements,
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.23.0",
            "pytest-cov>=4.1.0",
            "httpx>=0.27.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "storefront-seed=storefront_analytics.ingestion.seed_db:cli",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Framework :: FastAPI",
        "Topic :: Office/Business",
    ],
    zip_safe=False,
)
