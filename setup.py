from setuptools import setup, find_packages

setup(
    name="stream-matcher",
    version="0.1.0",
    description="Find the track playing in your MPRIS music player on Spotify, YouTube Music and Apple Music, with share and deep links",
    long_description=open("README.md", encoding="utf-8").read(),
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    license="MIT",
    packages=find_packages(exclude=["tests", "tests.*"]),
    package_data={"stream_matcher": ["py.typed"], "stream_matcher.i18n": ["*.json"]},
    install_requires=[
        "colorama>=0.4.6",
        "dbus-python",
        "requests",
        "typer",
    ],
    extras_require={
        "dev": [
            "pytest",
            "black",
            "ruff",
            "mypy",
        ]
    },
    entry_points={
        "console_scripts": [
            "stream-matcher=stream_matcher.cli:main",
        ]
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Sound/Audio",
        "Topic :: Utilities",
    ],
    keywords="music spotify youtube apple-music mpris share links",
)
