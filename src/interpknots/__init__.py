"""The top level interpknots module"""
from importlib.metadata import version

#: The version as calculated from the installed distribution
__version__ = version("interpknots")
del version

__all__ = ["__version__", "core", "boundary", "knots", "product", "grid", "errors"]
