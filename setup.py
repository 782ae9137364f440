from setuptools import setup, find_packages

setup(
    name="openapi-to-mcpserver",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src"),
    package_data={"openapi_to_mcpserver": ["conf/*.md"]},
    install_requires=[
        "pyyaml>=6.0",
        "pydantic>=2.7",
        "typer>=0.9",
        "fastapi>=0.100",
        "uvicorn>=0.23",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "httpx>=0.24",
        ],
    },
    entry_points={
        "console_scripts": [
            "openapi-to-mcp=openapi_to_mcpserver.cli:main",
        ],
    },
    description="Convert OpenAPI 3.0/3.1 specifications to MCP server tool configurations",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
)
