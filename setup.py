from setuptools import setup, find_packages

setup(
    name="gpmdp_rc",
    version="0.1.0",
    description="Command line remote control for Google Play Music Desktop Player",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "click>=8.0.0",
        "websockets>=12.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "dev": ["pytest>=7.0.0", "pytest-cov>=4.0.0"],
    },
    entry_points={
        "console_scripts": [
            "gpmdp-rc=gpmdp_rc.cli:main",
        ],
    },
)
