# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="compactor4ai",
    version="1.0.0",
    description="Comment stripper and minifier that shrinks source files for LLM contexts",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["compactor4ai*"]),
    python_requires=">=3.9",
    install_requires=[
        "tiktoken",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'compactor4ai=compactor4ai.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
