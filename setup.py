"""ElevenLabs CLI - Setup configuration."""

from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="elevenlabs-cli",
    version="0.1.0",
    author="ElevenLabs CLI Contributors",
    description="Command-line interface and MCP server for the ElevenLabs AI audio platform",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["elevenlabs_cli", "elevenlabs_cli.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio :: Speech",
        "Topic :: Utilities",
    ],
    python_requires=">=3.10",
    install_requires=[
        "click>=8.1.0",
        "httpx>=0.25.0",
        "rich>=13.0.0",
        "pyyaml>=6.0",
        "platformdirs>=3.0.0",
        "tomli>=2.0.0; python_version<'3.11'",
        "tomli-w>=1.0.0",
        "websockets>=14.0",
        "mcp>=1.9.0,<2",
    ],
    extras_require={
        "audio": [
            "pyaudio>=0.2.13",
            "pydub>=0.25.1",
        ],
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "pytest-asyncio>=0.23.0",
            "respx>=0.21.0",
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
            "ruff>=0.1.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "elevenlabs=elevenlabs_cli.main:main",
        ],
    },
    include_package_data=True,
    zip_safe=False,
)
