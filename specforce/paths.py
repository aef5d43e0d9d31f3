"""Path expansion and confinement of paths to a root directory."""

from __future__ import annotations

import os
import stat

from .errors import SecurityError


def _home_dir() -> str | None:
    variable = "USERPROFILE" if os.name == "nt" else "HOME"
    return os.environ.get(variable) or None


def expand_path(path: str) -> str:
    """Expand ``${VAR:-DEFAULT}`` variables, then a leading ``~``."""
    path = _expand_env(path)
    if path.startswith("~"):
        home = _home_dir()
        if home is not None:
            if path == "~":
                path = home
            elif path[1] in ("/", os.sep, "."):
                path = os.path.normpath(home + os.sep + path[1:])
    return path


def _find_closing_brace(path: str, start: int) -> int:
    balance = 0
    i = start
    while i < len(path):
        if path.startswith("${", i):
            balance += 1
            i += 2
            continue
        if path[i] == "}":
            balance -= 1
            if balance == 0:
                return i
        i += 1
    return -1


def _expand_env(path: str) -> str:
    while True:
        start = path.find("${")
        if start == -1:
            break
        end = _find_closing_brace(path, start)
        if end == -1:
            break
        content = path[start + 2 : end]
        name, separator, fallback = content.partition(":-")
        if separator:
            replacement = os.environ.get(name, "") or _expand_env(fallback)
        else:
            replacement = os.environ.get(content, "")
        path = path[:start] + replacement + path[end + 1 :]
    return path


def _escapes(relative: str) -> bool:
    return relative == ".." or relative.startswith(".." + os.sep)


def _check_within_root(abs_root: str, clean_target: str) -> None:
    try:
        root_stat = os.stat(abs_root)
    except FileNotFoundError:
        return
    except OSError as exc:
        raise SecurityError(f"failed to open root {abs_root}: {exc}") from exc
    if not stat.S_ISDIR(root_stat.st_mode):
        raise SecurityError(f"failed to open root {abs_root}: not a directory")

    if _escapes(clean_target):
        raise SecurityError(
            f"security: path traversal attempt or invalid path: {clean_target} escapes {abs_root}"
        )

    candidate = os.path.join(abs_root, clean_target)
    real_root = os.path.realpath(abs_root)
    real_candidate = os.path.realpath(candidate)
    if real_candidate != real_root and not real_candidate.startswith(
        real_root.rstrip(os.sep) + os.sep
    ):
        raise SecurityError(
            f"security: path traversal attempt or invalid path: {clean_target} resolves outside {abs_root}"
        )

    try:
        os.stat(candidate)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise SecurityError(f"security: path traversal attempt or invalid path: {exc}") from exc


def secure_path(root: str | os.PathLike[str], target: str | os.PathLike[str]) -> str:
    """Return the absolute form of ``target`` under ``root``, refusing paths that escape it."""
    abs_root = os.path.abspath(os.fspath(root))
    target_text = os.fspath(target)
    clean_target = os.path.normpath(target_text)

    if os.path.isabs(clean_target):
        try:
            relative = os.path.relpath(clean_target, abs_root)
        except ValueError:
            relative = ".."
        if relative.startswith(".."):
            raise SecurityError(
                f"security: absolute path {target_text} is outside root {abs_root}"
            )
        clean_target = relative

    _check_within_root(abs_root, clean_target)

    final_path = os.path.normpath(os.path.join(abs_root, clean_target))
    if not final_path.startswith(abs_root):
        raise SecurityError(f"security: path traversal attempt detected for {target_text}")
    return final_path