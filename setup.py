from setuptools import setup, find_packages

setup(
    name="hl7_fhir_gateway",
    version="1.0.0",
    packages=find_packages(include=["hl7_gateway", "hl7_gateway.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "pydantic>=2",
        "python-dotenv",
        "httpx",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    entry_points={
        "console_scripts": [
            "hl7-gateway=hl7_gateway.main:run",
        ],
    },
)
