# setup.py
from setuptools import setup, find_packages

setup(
    name="link_scout",
    version="0.1.0",
    description="Асинхронный поиск эндпоинтов в JavaScript и веб-страницах LinkScout",
    packages=find_packages(exclude=("tests", "tests.*")),
    package_data={"link_scout.report": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "yarl>=1.9",
        "click>=8.1",
        "pydantic>=2.0",
        "PyYAML>=6.0",
        "Jinja2>=3.1",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
            "trustme>=1.1",
        ],
    },
    entry_points={
        "console_scripts": [
            "link-scout=link_scout.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
