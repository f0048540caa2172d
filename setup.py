# setup.py
from setuptools import setup, find_packages

setup(
    name="link-guardian",
    version="0.1.0",
    description="Асинхронный поиск битых ссылок в репозиториях GitHub и на сайтах",
    packages=find_packages(exclude=("tests", "tests.*")),  # найдёт link_guardian и подпакеты
    package_data={"link_guardian.report": ["templates/*.j2"]},
    include_package_data=True,
    install_requires=[
        "aiohttp>=3.9",
        "beautifulsoup4>=4.12",
        "click>=8.1",
        "jinja2>=3.1",
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
            "link-guardian=link_guardian.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
