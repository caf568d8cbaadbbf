import os
from collections.abc import Iterable
from fnmatch import fnmatch
from pathlib import Path, PurePath


class LoadError(Exception):
    """Raised when an input path does not exist or cannot be listed."""


def collect_files(
    paths: Iterable[str | Path],
    *,
    extensions: tuple[str, ...] = (".md", ".mdc"),
    exclude: tuple[str, ...] = (),
) -> list[Path]:
    """Expand *paths* into the rule files to check.

    Directories are walked recursively and filtered by *extensions* and
    *exclude*; explicit file arguments are always kept.  Duplicates are
    dropped and the first occurrence wins.
    """
    suffixes = {e.lower() for e in extensions}
    files: list[Path] = []

    for raw in paths:
        path = Path(raw)
        if not path.exists():
            msg = f"Path {str(raw)!r} does not exist"
            raise LoadError(msg)

        if path.is_file():
            files.append(path)
            continue

        try:
            with os.scandir(path):
                pass
        except OSError as exc:
            msg = f"Path {str(raw)!r} cannot be read: {exc.strerror or exc}"
            raise LoadError(msg) from exc

        for candidate in sorted(path.rglob("*")):
            if not candidate.is_file() or candidate.suffix.lower() not in suffixes:
                continue
            if _is_excluded(candidate.relative_to(path), exclude):
                continue
            files.append(candidate)

    return list(dict.fromkeys(files))


def _is_excluded(relative: PurePath, patterns: tuple[str, ...]) -> bool:
    posix = relative.as_posix()
    for pattern in patterns:
        if fnmatch(posix, pattern):
            return True
        if any(fnmatch(part, pattern) for part in relative.parts):
            return True
    return False
