"""Confine request paths to the configured content root."""

from pathlib import Path, PurePosixPath


class ForbiddenPath(Exception):
    """Raised when a request path would escape the content root."""


def resolve_sandbox_path(root: Path, request_path: str) -> Path:
    """Map an absolute request path to a file path beneath ``root``.

    Rejects NUL bytes, ``..`` segments and anything whose resolved location
    (symlinks included) is not inside ``root``.
    """
    if "\x00" in request_path:
        raise ForbiddenPath(request_path)

    relative = PurePosixPath(request_path.lstrip("/"))
    if not relative.parts or ".." in relative.parts:
        raise ForbiddenPath(request_path)

    root = root.resolve()
    target = root.joinpath(*relative.parts).resolve()
    if root not in target.parents:
        raise ForbiddenPath(request_path)
    return target
