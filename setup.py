"""Install media accounts package."""

from setuptools import setup, find_packages

setup(
    name='media-accounts',
    version='0.1.0',
    packages=find_packages(exclude=['*tests*']),
    install_requires=[
        "flask",
        "werkzeug",
        "pyjwt",
        "sqlalchemy",
        "flask-sqlalchemy",
        "pytz",
        "retry",
        "wtforms",
        "email-validator",
        "flask-cors"
    ],
    extras_require={
        "test": [
            "pytest",
            "hypothesis"
        ]
    },
    zip_safe=False
)
