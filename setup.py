import re
from pathlib import Path

from setuptools import setup

_HERE = Path(__file__).parent
_VERSION = re.search(
    r'^__version__ = "([^"]+)"$',
    (_HERE / "pysrc" / "timemoment" / "_pymoment.py").read_text(),
    re.MULTILINE,
)
assert _VERSION is not None, "version not found"

setup(
    name="timemoment",
    version=_VERSION.group(1),
    description=(
        "Immutable date-time values with nanosecond precision "
        "and a fixed UTC offset"
    ),
    license="MIT",
    python_requires=">=3.9",
    package_dir={"": "pysrc"},
    packages=["timemoment"],
    install_requires=[],
    extras_require={
        "test": [
            "pytest",
            "hypothesis",
            "time-machine<3",
            "pytest-benchmark",
        ],
        "bench": ["pyperf"],
        "docs": [
            "sphinx",
            "furo",
            "myst-parser",
            "sphinx-copybutton",
            "enum-tools[sphinx]",
        ],
    },
    classifiers=[
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
    ],
)
