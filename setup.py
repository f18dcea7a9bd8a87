# setup.py
from setuptools import setup, find_packages

setup(
    name="cointrail",
    version="0.1.0",
    description="Personal finance tracker with a monthly cashflow dashboard",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"webapp": ["templates/*.html"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "click>=7.0",
        "pyyaml>=5.3",
        "python-dotenv>=0.19",
        "pydantic>=2.0",
        "fastapi>=0.110",
        "jinja2>=3.0",
        "python-multipart>=0.0.6",
        "uvicorn>=0.20",
        "xlsxwriter>=3.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
            "openpyxl>=3.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "cointrail=coin_trail.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
