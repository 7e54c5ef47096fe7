#!/usr/bin/env python

import setuptools

setuptools.setup(
    name="wikiview",
    version="0.3.0",
    author="wikiview contributors",
    description="A viewer part and standalone viewer for MediaWiki markup files.",
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    package_data={"wikiview": ["configs/*.yaml"]},
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Environment :: X11 Applications :: Qt",
    ],
    install_requires=[
        "qtpy>=2.0",
        "PyQt5>=5.15",
        "PyYAML>=5.3",
        "termcolor>=1.1.0",
        'colorama>=0.4.4; platform_system=="Windows"',
        "mwparserfromhell>=0.6.4",
        "bleach>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.0"],
    },
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "wikiview = wikiview.gui.app:main",
        ],
    },
)
