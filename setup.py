import setuptools
import os
import os.path


# Get the readme file
if os.path.isfile("README.md"):
    with open("README.md", "r") as fh:
        long_description = fh.read()
else:
    long_description = ""

setuptools.setup(
    name="ed_hilbert",
    version="0.1.0",
    author="Giovanni Cataldi",
    author_email="giovacataldi96@gmail.com",
    description="Single- and many-particle Hilbert spaces for Exact Diagonalization",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/gcataldi96/ed-lgt",
    project_urls={},
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    package_dir={
        "ed_hilbert": "ed_hilbert",
        "ed_hilbert.modeling": "ed_hilbert/modeling",
        "ed_hilbert.tools": "ed_hilbert/tools",
    },
    packages=[
        "ed_hilbert",
        "ed_hilbert.modeling",
        "ed_hilbert.tools",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "scipy",
        "numba",
    ],
    extras_require={"test": ["pytest"]},
)
