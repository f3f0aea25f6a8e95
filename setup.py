from setuptools import setup, find_packages

setup(
    name="telecare-booking",
    version="0.1.0",
    description="Scheduling and doctor recommendation engine for a telehealth portal",
    packages=find_packages(exclude=["tests", "tests.*", "alembic", "alembic.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "alembic",
        "psycopg2-binary",
        "redis",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "prometheus-client",
        "prometheus-fastapi-instrumentator",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    entry_points={
        "console_scripts": [
            "telecare-replay-events=telecare.replay_events:main",
        ],
    },
)
