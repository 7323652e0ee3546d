# setup.py
from setuptools import setup, find_packages

setup(
    name="cache_warmer",
    version="0.1.0",
    description="Асинхронный прогрев кеша nginx/CDN по списку URI",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "aiohttp>=3.9",
        "Brotli>=1.1",  # aiohttp декодирует 'Content-Encoding: br' только с ним
        "click>=8.1",
        "pydantic>=2.5",
        "PyYAML>=6.0",
        "tqdm>=4.66",
        "yarl>=1.9",
    ],
    extras_require={
        "test": [
            "multidict>=6.0",
            "pytest>=7.4",
            "pytest-asyncio>=0.23",
        ],
    },
    entry_points={
        "console_scripts": [
            "cache-warmer=cache_warmer.cli:cli",
        ],
    },
    python_requires=">=3.11",
)
