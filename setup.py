from setuptools import setup, find_packages

setup(
    name="pagewarden",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "playwright>=1.40.0",
        "rich",
        "pytest>=7.0.0",
        "pytest-asyncio>=0.21.0",
        "python-dotenv>=1.0.0",
    ],
    entry_points={
        "console_scripts": [
            "pagewarden-fetch=pagewarden.cli:main",
        ],
    },
    python_requires=">=3.10",
    description="Resilient remote-browser session manager built on Playwright",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
