# setup.py
from setuptools import setup, find_packages

setup(
    name="multilog",
    version="1.0.0",
    description="Leveled, multi-backend logging with daily, hourly and size-based file rotation",
    python_requires=">=3.11",
    package_dir={"": "src"},
    packages=find_packages(where="src"),  # Encuentra automáticamente el paquete 'multilog'
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'multilog=multilog.interface.cli.app:main',  # Log pipe con rotación
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: POSIX",
    ],
)
