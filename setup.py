from setuptools import setup, find_packages

import os
import sys
import io


def read(*names, **kwargs):
    with io.open(
        os.path.join(os.path.dirname(__file__), *names),
        encoding=kwargs.get("encoding", "utf8"),
    ) as fp:
        return fp.read()


if sys.argv[-1] == "publish":
    os.system("rm dist/*")
    os.system("python setup.py sdist")
    os.system("python setup.py bdist_wheel")
    os.system("twine upload dist/*")
    sys.exit()

test_req = [
    "coverage>=4.5.1",
    "pytest>=3.5.1",
    "pytest-cov>=2.5.1",
]

docs_req = [
    "Sphinx>=1.7.5",
    "numpydoc>=0.8.0",
]
setup(
    name="fbt",
    version="1.0.0",
    packages=find_packages("src"),
    package_dir={"": "src"},
    python_requires=">=3.7",
    install_requires=[
        "numpy>=1.16",
        "scipy>=1.4",
        "click>=7.0",
        "rich>=9.0",
        "toml>=0.10",
        "importlib_metadata; python_version<'3.8'",
    ],
    extras_require={"test": test_req, "doc": docs_req, "dev": test_req + docs_req,},
    entry_points={"console_scripts": ["fbt=fbt._cli:main"]},
    author="Zhongbo Kang, Alexei Prokudin, Nobuo Sato, John Terry",
    description="Fast Bessel (Hankel) transforms with Ogata's quadrature",
    long_description=read("README.rst"),
    license="MIT",
    keywords="hankel transform; bessel; ogata quadrature; TMD",
    classifiers=[
        "Programming Language :: Python :: 3.7",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
    ],
)
