import os
from typing import Optional


# Project base directory (repo root)
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))

# Default static UI directory inside the project (repo_root/www)
DEFAULT_UI_DIR = os.path.join(BASE_DIR, "www")


def resolve_path(path: str) -> str:
    """
    Return an absolute path; relative paths are taken relative to BASE_DIR.
    """
    return path if os.path.isabs(path) else os.path.abspath(os.path.join(BASE_DIR, path))


def ui_dir_or_none(path: str) -> Optional[str]:
    """Return the resolved UI directory if it exists, else None."""
    resolved = resolve_path(path)
    return resolved if os.path.isdir(resolved) else None
