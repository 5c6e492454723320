from setuptools import setup, find_packages

setup(
    name="syntaxflow",
    version="0.1.0",
    description="syntaxflow - AST core for a small expression/statement language",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="syntaxflow Project",
    python_requires=">=3.9",
    packages=find_packages(),
    entry_points={
        "console_scripts": [
            "syntaxflowc=syntaxflow.cli:main",
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Topic :: Software Development :: Compilers",
    ],
)
