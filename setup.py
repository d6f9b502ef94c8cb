from setuptools import setup, find_packages

setup(
    name="connect-four-engine",
    version="0.2.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["run"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "gymnasium",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "connect-four=connect_four.interfaces.cli:main",
        ],
    },
)
