import os

from setuptools import setup, find_packages

__version__ = "0.1"

tests_require = ['pytest', 'mypy', 'pycodestyle']

extras_require = {
    'test': tests_require,
}


def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


setup(
    name='s7tool',
    version=__version__,
    description='Command line client to read, write and poll Siemens S7 PLC memory areas',
    packages=find_packages(include=['s7tool', 's7tool.*']),
    package_data={'s7tool': ['py.typed']},
    license='MIT',
    long_description=read('README.rst'),
    install_requires=[
        'python-snap7>=2.0',
        'click>=8.0',
    ],
    entry_points={
        'console_scripts': [
            's7tool = s7tool.cli:main',
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Topic :: System :: Hardware",
        "Intended Audience :: Developers",
        "Intended Audience :: Manufacturing",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires='>=3.9',
    extras_require=extras_require,
)
