# setup.py
from setuptools import setup, find_packages

setup(
    name="aiscript-tools",
    version="0.1.0",
    packages=find_packages(include=["aiscript", "aiscript.*", "aiscript_lsp", "aiscript_lsp.*"]),
    package_data={"aiscript": ["definitions/data/*.xml"]},
    python_requires=">=3.9",
    install_requires=[
        "pygls>=1.3,<2",
        "lsprotocol",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    entry_points={
        "console_scripts": ["aiscript-ls = aiscript_lsp.server:main"],
    },
    zip_safe=False,
)
