from setuptools import setup

setup(
    name="tabhtml",
    version="0.1.0",
    description="Indentation-based markup (tags, ids, classes, attributes) that compiles to html",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    packages=['tabhtml'],
    python_requires=">=3.8",
    install_requires=[
        "watchdog",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": ["tabhtml=tabhtml.__main__:main"],
    },
)
