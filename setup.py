# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="workspace-mirror",
    version="1.0.0",
    description="Indexa un espacio de trabajo y replica sus archivos en un servicio de análisis remoto",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["workspace_mirror*"]),
    package_data={
        "workspace_mirror.interface": ["locales/*.json"],
    },
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "requests",
        "customtkinter",  # Ventana de estado (modo GUI)
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        'console_scripts': [
            'workspace-mirror=workspace_mirror.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
