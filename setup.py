from setuptools import setup, find_packages

setup(
    name="chanjo",
    version="0.1.0",
    packages=find_packages(include=["chanjo", "chanjo.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0,<2.1",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "python-dotenv",
        "pydantic",
        "pydantic-settings",
        "celery",
        "prometheus-client",
        "prometheus-fastapi-instrumentator",
        "tzdata",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
