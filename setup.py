from setuptools import setup, find_packages

setup(
    name="devbox",
    version="0.1.0",
    description="Local multi-service development environments on docker-compose",
    python_requires=">=3.11",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    install_requires=[
        "pydantic>=2.0",
        "click>=8.0",
        "python-dotenv>=1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "devbox=devbox.CLI.main:main",
        ],
    },
)
