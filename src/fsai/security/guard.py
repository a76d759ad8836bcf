"""
Access guard confining tool paths to an authorized root.

Every path a tool touches is resolved and checked here first. Containment is
decided per path segment, so a root of ``/home/user`` does not authorize the
sibling ``/home/user2``.
"""

import logging
import os
from pathlib import Path, PurePath

logger = logging.getLogger(__name__)

ROOT_ENV_VAR = "FSAI_AUTHORIZED_ROOT"


def resolve_path(raw_path: str | Path, current_path: str | Path | None = None) -> Path:
    """
    Resolve a raw path to an absolute path.

    Relative paths are resolved against ``current_path`` when one is given,
    otherwise against the process working directory. ``~`` is expanded.
    Resolution is lexical, so paths that do not exist yet still resolve.

    Args:
        raw_path: Path as supplied by the model or the user.
        current_path: Directory the user is currently looking at.

    Returns:
        Absolute, normalized path.
    """
    expanded = os.path.expanduser(str(raw_path))

    if current_path and not os.path.isabs(expanded):
        base = os.path.expanduser(str(current_path))
        return Path(os.path.abspath(os.path.join(base, expanded)))

    return Path(os.path.abspath(expanded))


def _segments(path: str | Path) -> tuple[str, ...]:
    return PurePath(os.path.normcase(str(path))).parts


def is_within(path: str | Path, root: str | Path) -> bool:
    """Whether ``path`` equals ``root`` or lies beneath it, compared by segment."""
    root_parts = _segments(root)
    path_parts = _segments(path)
    return path_parts[: len(root_parts)] == root_parts


class AccessGuard:
    """
    Enforces the sandbox invariant for tool paths.

    The authorized root defaults to the user's home directory. Root access
    (``allow_root=True``) lifts the restriction entirely.
    """

    def __init__(self, root: str | Path | None = None) -> None:
        """
        Initialize the guard.

        Args:
            root: Authorized root. Defaults to $FSAI_AUTHORIZED_ROOT, then
                the user's home directory.
        """
        configured = root or os.environ.get(ROOT_ENV_VAR) or Path.home()
        self.root = resolve_path(configured)

    resolve = staticmethod(resolve_path)

    def is_allowed(
        self,
        raw_path: str | Path,
        allow_root: bool,
        current_path: str | Path | None = None,
    ) -> bool:
        """
        Check whether a raw path may be touched.

        The resolved path must be inside the root both lexically and after
        symlinks are followed, so a link inside the root that points outside
        of it is rejected.
        """
        if allow_root:
            return True

        resolved = resolve_path(raw_path, current_path)
        if not is_within(resolved, self.root):
            return False

        return is_within(os.path.realpath(resolved), os.path.realpath(self.root))

    def check_path(
        self,
        raw_path: str | Path,
        allow_root: bool,
        current_path: str | Path | None = None,
    ) -> tuple[bool, str | None]:
        """
        Check a path and explain a rejection.

        Returns:
            Tuple of (allowed, reason)
        """
        if self.is_allowed(raw_path, allow_root, current_path):
            return True, None

        logger.warning(f"Access denied outside {self.root}: {raw_path}")
        return False, f"Access to path '{raw_path}' is disallowed."

    def __repr__(self) -> str:
        return f"<AccessGuard root={self.root}>"
