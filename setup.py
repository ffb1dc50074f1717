# setup.py
from setuptools import setup, find_packages

setup(
    name="microlisp",
    version="0.1.0",
    packages=find_packages(include=["microlisp", "microlisp.*"]),
    package_data={"microlisp": ["prelude/*.mlisp"]},
    python_requires=">=3.10",
    install_requires=["numpy"],
    extras_require={"test": ["pytest", "hypothesis"]},
    entry_points={"console_scripts": ["microlisp=microlisp.repl:main"]},
    zip_safe=False,
)
