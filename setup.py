from setuptools import setup, find_packages

setup(
    name="siraha_bazaar_locator",
    version="0.1",
    packages=find_packages(include=['routers*', 'schemas*', 'models*', 'services*', 'dependencies*', 'core*']),
    py_modules=['main'],
    package_dir={'': '.'},
    install_requires=[
        "fastapi>=0.100.0",
        "uvicorn>=0.23.0",
        "email-validator>=1.3.1",
        "python-dotenv>=1.0.0",
        "pymongo>=4.0.0",
        "motor>=3.1.0",
        "python-jose[cryptography]>=3.3.0",
        "passlib[bcrypt]>=1.7.4",
        "bcrypt>=4.0.0,<4.1",
        "python-multipart>=0.0.6",
        "pydantic>=2.0.0",
        "redis>=4.6.0",
        "geopy>=2.3.0"
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "httpx>=0.24.0"
        ]
    },
)
