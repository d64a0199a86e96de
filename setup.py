from setuptools import setup, find_packages

setup(
    name="riziky-boutic-flash-sales",
    version="0.1.0",
    packages=find_packages(include=["src", "src.*"]),
    install_requires=[
        "flask",
        "werkzeug",
        "bleach",
        "APScheduler>=3.9,<4",
        "python-json-logger",
        "prometheus-client",
    ],
    extras_require={
        "tests": ["pytest"],
    },
    python_requires=">=3.8",
)
