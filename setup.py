from setuptools import setup, find_packages
import os

install_requires = ["lark>=1.1", "pydantic>=2.0"]

# Define optional dependencies for development and specific features
extras_require = {"dev": ["pytest"], "lsp": ["pygls>=1.1.0,<2.0", "lsprotocol"]}  # Language Server Protocol support

setup(
    name="arrowscript-compiler",
    version="0.1.0",
    packages=find_packages(where=".", exclude=["tests", "tests.*"]),
    install_requires=install_requires,
    extras_require=extras_require,
    python_requires=">=3.10",
    entry_points={
        "console_scripts": [
            "asc = asc.cli:main",
            "asc-lsp = asc.server:start",
        ],
    },
    include_package_data=True,
    package_data={"asc.parser.core": ["*.lark"]},
    description="A type-inferring front end for ArrowScript, a tiny expression-oriented language.",
    long_description=open("README.md").read() if os.path.exists("README.md") else "",
    long_description_content_type="text/markdown",
)
