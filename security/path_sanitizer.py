"""
Path confinement for file-serving features (CWE-22).

resolve() is pure: it never touches the file system beyond normalising the
path, so callers perform the actual read afterwards.
"""

import os
from pathlib import Path
from typing import Union

from app.exceptions import PathTraversalError

FORBIDDEN_SEGMENTS = ("..", "/", "\\", "\x00")


def resolve(base_dir: Union[str, Path], candidate_name: str) -> Path:
    """
    Resolve a user supplied file name inside base_dir.

    Args:
        base_dir: Confinement directory (relative paths are made absolute)
        candidate_name: Bare file name from user input

    Returns:
        Absolute path of the file inside base_dir

    Raises:
        PathTraversalError: name is empty, contains a traversal sequence or a
            separator, or the resolved path leaves base_dir

    Examples:
        >>> resolve("/data/recipes", "lasagna.txt")
        PosixPath('/data/recipes/lasagna.txt')

        >>> resolve("/data/recipes", "../../etc/passwd")
        PathTraversalError
    """
    if not candidate_name or not candidate_name.strip():
        raise PathTraversalError("File name is empty")

    if any(segment in candidate_name for segment in FORBIDDEN_SEGMENTS):
        raise PathTraversalError("File name contains a path separator or traversal sequence")

    base = Path(os.path.abspath(base_dir))
    full = Path(os.path.abspath(base / candidate_name))

    # abspath normalises without following symlinks; compare whole components
    if full == base or base not in full.parents:
        raise PathTraversalError("Resolved path escapes the base directory")

    return full
