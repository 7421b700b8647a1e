# type: ignore
from setuptools import find_packages, setup

setup(
    name="interpknots",
    version="0.1.0",
    description="Iterate over the knots of an interpolation grid, "
    "extended by its boundary policy",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=["numpy", "pydantic>=2.0", "click"],
    extras_require={"dev": ["pytest"]},
    entry_points={"console_scripts": ["interpknots = interpknots.cli:cli"]},
)
