from setuptools import setup, find_packages
import codecs
import os

here = os.path.abspath(os.path.dirname(__file__))

with codecs.open(os.path.join(here, "README.md"), encoding="utf-8") as fh:
    long_description = "\n" + fh.read()

VERSION = '0.1.0'
DESCRIPTION = 'Half-edge polygon meshes with face extrude and inset'

# Setting up
setup(
    name="pymeshedit",
    version=VERSION,
    author="rootjatin (Jatin Sharma)",
    author_email="<jatin100198@gmail.com>",
    description=DESCRIPTION,
    long_description_content_type="text/markdown",
    long_description=long_description,
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.8",
    install_requires=['numpy'],
    extras_require={
        "test": ["pytest"],
    },
    keywords=['python', 'three dimensional', 'mesh', 'half-edge', 'obj', 'extrude', 'inset'],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Designers",
        "Programming Language :: Python :: 3",
        "Operating System :: Unix",
        "Operating System :: MacOS :: MacOS X",
        "Operating System :: Microsoft :: Windows",
    ]
)
