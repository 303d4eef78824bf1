"""Setup file for the package."""

from setuptools import setup, find_packages

setup(
    name="hailtrace-scraper",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "playwright>=1.40.0",
        "requests>=2.31.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        'test': [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'hailtrace-scraper=hailtrace_scraper.main:main',
            'hailtrace-api=hailtrace_scraper.api_main:main',
        ],
    },
    author="Your Name",
    description="Playwright scraper and GraphQL client for HailTrace storm history",
    python_requires='>=3.8',
)
