from os import path

from setuptools import setup, find_packages

import nativebuild.scripts.version as version

here = path.abspath(path.dirname(__file__))

with open(path.join(here, 'README.rst'), encoding='utf-8') as f:
    long_description = f.read()

setup(
    name='nativebuild',
    description='Builds GraalVM native images from Python projects',
    long_description=long_description,
    version=version.version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={'nativebuild': ['data/*.yaml']},
    include_package_data=True,
    python_requires='>=3.7',
    install_requires=[
        'click>=8.0',
        'humanfriendly',
        'rainbow_logging_handler',
        'pyyaml'
    ],
    tests_require=['pytest'],
    extras_require={
        'test': ['pytest']
    },
    license='GPLv3',
    classifiers=[
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Software Development :: Build Tools",
        "License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)",
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        'Intended Audience :: Developers',
    ],
    entry_points='''
        [console_scripts]
        nativebuild=nativebuild.scripts.cli:cli_with_error_catching
    '''
)
