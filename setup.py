# setup.py
from setuptools import setup, find_packages

setup(
    name="sales-dashboard",
    version="0.1.0",
    description="Seed a product transaction dataset and serve month-filtered listings, statistics and chart data over HTTP",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "fastapi>=0.100",
        "uvicorn>=0.23",
        "anyio>=4.0",
        "pymongo>=4.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "sales-dashboard=sales_dashboard.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
