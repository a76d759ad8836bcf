"""
FSai - AI file-system assistant

Turns natural-language instructions into risk-classified, human-confirmed
file-system operations confined to an authorized root directory.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fsai")
except PackageNotFoundError:
    __version__ = "0.4.0"

__all__ = [
    "__version__",
]
