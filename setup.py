# setup.py
from setuptools import setup, find_packages

setup(
    name="url_inventory",
    version="0.1.0",
    description="URL inventory: same-origin domain crawler, status checker and exporter",
    packages=find_packages(include=["url_inventory", "url_inventory.*"]),
    package_data={"url_inventory.report": ["templates/*.j2"]},
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "Jinja2>=3.1",
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
        "console_scripts": ["url-inventory=url_inventory.cli:cli"],
    },
    python_requires=">=3.11",
)
