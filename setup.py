"""Setup configuration for buildsweep package."""

from setuptools import setup, find_packages

setup(
    name="buildsweep",
    version="0.1.0",
    description="Watch-and-rebuild loop and post-build source sanitizer for userscript builds",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
        "pyyaml>=6.0",
        "click>=8.1.0",
        "rich>=13.0.0",
        "tree-sitter>=0.23.0",
        "tree-sitter-language-pack>=0.7.0,<1.0",
        "watchdog>=3.0.0",
        "pathspec>=0.11.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.11.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
            "black>=23.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "buildsweep=buildsweep.cli.app:main",
        ],
    },
)
