# ABOUTME: Main package initialization for the portfolio content manager.
# ABOUTME: Exports version information from pyproject.toml.

from importlib.metadata import version

__version__ = version("portfolio-cms")
