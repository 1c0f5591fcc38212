from setuptools import setup, find_packages

setup(
    name="folio-rebalancer",
    version="1.0.0",
    author="Folio Rebalancer Team",
    description="Allocation tracking and rebalancing calculation engine for manually entered portfolios",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    package_data={
        "folio_engine": ["py.typed"],
        "folio_config": ["py.typed"],
        "folio_book": ["py.typed"],
    },
    install_requires=[
        "pydantic==2.11.7",
        "PyYAML>=6.0",
        "numpy>=1.24",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    python_requires=">=3.11",
)
