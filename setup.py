from setuptools import setup, find_packages

setup(
    name="xo_sdk",
    version="0.1.0",
    description="Xen Orchestra JSON-RPC client with consumer-driven contract testing",
    author="xo_sdk Team",
    packages=find_packages(include=["xo_sdk", "xo_sdk.*"]),
    install_requires=[
        "httpx>=0.24.0",
        "aiohttp>=3.8.0",
        "opentelemetry-api>=1.14.0",
        "opentelemetry-sdk>=1.14.0",
        "opentelemetry-exporter-otlp>=1.14.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov",
            "black",
            "isort",
            "pylint",
        ],
        "test": [
            "pytest>=7.0.0",
            "pytest-cov",
        ],
    },
    python_requires=">=3.9",
)
