from setuptools import setup, find_packages

setup(
    name="portfolio-market-data",
    version="1.0.0",
    author="Portfolio Tracker Team",
    description="Cached, circuit-broken market data access for stock, bond and FX pricing",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "portfolio_market_data": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "aiohttp==3.12.15",
        "PyYAML==6.0.2",
        "dependency-injector>=4.41",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },
    python_requires=">=3.11",
)
