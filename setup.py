from setuptools import setup, find_packages

setup(
    name="fusion2048",
    version="0.1.0",
    packages=find_packages(include=["fusion2048", "fusion2048.*"]),
    install_requires=[
        "numpy",
        "gymnasium",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "play2048=fusion2048.play_2048:main",
        ],
    },
)
