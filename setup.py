from setuptools import setup, find_packages
import os
import io

here = os.path.abspath(os.path.dirname(__file__))

# Get the version without importing the package (and its dependencies)
about = {}
with io.open(os.path.join(here, "ccdeps", "version.py"), encoding="utf-8") as ff:
    exec(ff.read(), about)
__version__ = about["__version__"]

# Get the long description from the README file
with io.open(os.path.join(here, "ccdeps", "README.ccdeps-detect.rst"), encoding="utf-8") as ff:
    long_description = ff.read()

setup(
    name="ccdeps",
    version=__version__,
    description="Find the local files a C/C++ compilation depends upon so they can be shipped to a remote compiler",
    long_description=long_description,
    long_description_content_type="text/x-rst",
    python_requires=">=3.9",
    license="Apache-2.0",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Build Tools",
        "License :: OSI Approved :: Apache Software License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13"
    ],
    keywords="c++ make distributed-build dependencies",
    packages=find_packages(),
    package_data={"": [ff for ff in os.listdir(os.path.join(here, "ccdeps")) if ff.startswith("README")]},
    include_package_data=True,
    install_requires=[
        "configargparse>=1.5.3",
        "appdirs>=1.4.4",
        "psutil>=5.9.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    scripts=[ff for ff in os.listdir(here) if ff.startswith("ccdeps-")],
)
