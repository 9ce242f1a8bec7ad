import setuptools

try:
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()
except FileNotFoundError:
    long_description = "Launch, stop and list cloud deployments with simulated players"

setuptools.setup(
    name="deployment-launcher",
    version="0.1.0",
    description="Launch, stop and list cloud deployments with simulated players",
    long_description=long_description,
    long_description_content_type="text/markdown",
    package_dir={"": "src"},
    packages=setuptools.find_packages(
        where="src", include=["deployment_launcher", "deployment_launcher.*"]
    ),
    install_requires=[
        "aiohttp",
        "pydantic>=2.11",
        "python-dotenv",
        "requests",
        "rich",
        "typer",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "deployment-launcher=deployment_launcher.cli.main:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
