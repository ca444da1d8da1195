"""SMO-SVM — minimal setup.py for editable installs."""

from setuptools import setup, find_packages

setup(
    name="smo-svm",
    version="1.0.0",
    description="Binary Support Vector Machine trained with Sequential Minimal Optimization",
    author="LucaGandolfi77",
    python_requires=">=3.10",
    packages=find_packages(include=["smo_svm", "smo_svm.*"]),
    package_data={"smo_svm": ["config/*.yaml"]},
    install_requires=[
        "scikit-learn>=1.3.0",
        "pandas>=2.0.0",
        "numpy>=1.24.0",
        "matplotlib>=3.7.0",
        "seaborn>=0.12.0",
        "pyyaml>=6.0",
        "joblib>=1.3.0",
    ],
    extras_require={
        "dev": ["pytest>=7.4.0"],
    },
)
