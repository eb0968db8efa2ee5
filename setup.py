# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="ckdu",
    version="1.0.0",
    description="Per-directory disk usage report that counts hard-linked content once",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["ckdu", "ckdu.*"]),
    install_requires=[],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'ckdu=ckdu.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
)
