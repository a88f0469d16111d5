from setuptools import setup, find_packages

setup(
    name="officeids",
    version="0.1.0",
    description="CCccNNN office identifier allocation with collision checks",
    packages=find_packages(exclude=["*.tests", "*.tests.*"]),
    install_requires=[
        "pandas>=1.3.0",
        "requests>=2.26.0",
        "pycountry>=22.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
        ],
    },
    python_requires=">=3.8",
)
