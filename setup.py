from setuptools import setup, find_packages

setup(
    name="py-heatmap-selection",
    version="0.1.0",
    author="Zachary Stensland",
    author_email="zach.stensland@ucsf.edu",
    description="Resolve clicks and drags on composite heatmaps to data rows and columns",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/py-heatmap-selection",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pandas",
        "scipy",
        "anndata",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
)
