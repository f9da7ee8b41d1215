# setup.py
from setuptools import setup, find_packages

setup(
    name="site_drift",
    version="0.1.0",
    description="Snapshot the link tree of a documentation site and detect drift against it",
    packages=find_packages(include=["site_drift", "site_drift.*"]),
    package_data={"site_drift.report": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
        "playwright>=1.40",
        "pydantic>=2.5",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "site-drift=site_drift.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
