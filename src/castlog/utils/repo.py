"""Helpers for locating the site repository clone."""

import os
import subprocess
from pathlib import Path

from castlog.utils.errors import RepoError


def _git(*args: str) -> str:
    try:
        result = subprocess.run(
            ["git", *args], capture_output=True, text=True, check=True
        )
    except (OSError, subprocess.CalledProcessError) as e:
        raise RepoError(f"git {' '.join(args)} failed: {e}") from e
    return result.stdout.strip()


def repo_root() -> Path:
    """Return the top-level directory of the enclosing git repository."""
    return Path(_git("rev-parse", "--show-toplevel"))


def chdir_root() -> Path:
    """Change the working directory to the repository root and return it."""
    root = repo_root()
    os.chdir(root)
    return root


def remote_repo(remote: str = "origin") -> str:
    """Return the repository name of the given git remote.

    Example:
        ``git@github.com:someone/site.github.io.git`` -> ``site.github.io``
    """
    url = _git("remote", "get-url", remote)
    name = url.rstrip("/").rsplit("/", 1)[-1].rsplit(":", 1)[-1]
    return name.removesuffix(".git")


def check_repo(expected: str, remote: str = "origin") -> Path:
    """Move to the repository root and verify its remote name.

    Raises:
        RepoError: If not inside a clone, or the remote does not match
    """
    root = chdir_root()
    actual = remote_repo(remote)
    if actual != expected:
        raise RepoError(f"Remote is {actual!r}, but should be {expected!r}")
    return root
