from setuptools import find_packages, setup

setup(
    name="pagerduty-backend",
    version="0.1.0",
    license="Apache License 2.0",
    author="pagerduty-backend contributors",

    python_requires=">=3.11",
    description="Asynchronous PagerDuty REST client core for incident "
                "management backends.",

    packages=find_packages(exclude=('tests', 'tests.*')),

    install_requires=[
        "httpx>=0.27,<1.0",
        "pydantic>=2.7,<3.0",
        "pydantic-settings[yaml]>=2.4,<3.0",
        "prometheus-client>=0.20",
        "python-json-logger>=3.1",
    ],

    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-asyncio>=0.23",
        ],
    },

    test_suite="tests",

    classifiers=[
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.12',
    ],
)
