"""
Sandboxing for FSai.

This package confines every tool path to the authorized root directory.
"""

from fsai.security.guard import AccessGuard, is_within, resolve_path

__all__ = [
    "AccessGuard",
    "is_within",
    "resolve_path",
]
