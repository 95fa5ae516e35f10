from setuptools import setup, find_packages

setup(
    name="fractus",
    version="1.0.0",
    description="Shamir's Secret Sharing over GF(256) with CRC-32 integrity checks. Split any secret into K-of-N shares.",
    long_description=open("README.md").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.11",
    install_requires=[
        "cryptography>=41.0.0",
        "aiohttp>=3.9",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    entry_points={
        "console_scripts": [
            "fractus=fractus.cli:main",
            "fractus-web=fractus.web:main",
        ],
    },
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Topic :: Security :: Cryptography",
    ],
    license="MIT",
)
