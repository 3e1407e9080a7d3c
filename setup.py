from setuptools import setup, find_packages

setup(
    name="swr-core",
    version="0.1.0",
    description="Wavelet-based sharp-wave ripple detection library",
    packages=find_packages(exclude=["tests", "tests.*", "scripts", "scripts.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy", "scipy", "pandas", "h5py", "joblib"
    ],
    extras_require={
        "test": ["pytest"],
    },
)
