from __future__ import annotations

import dataclasses
import fnmatch
import functools
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from mdclint.core._types import SEVERITY_LEVEL, Severity

if TYPE_CHECKING:
    from mdclint.core.rule import Rule


class ConfigError(ValueError):
    """Raised when a config file contains an invalid value."""


def _is_glob(pattern: str) -> bool:
    return any(c in pattern for c in "*?[")


@dataclass(frozen=True)
class MdclintConfig:
    """Configuration for rule file checking.

    Can be loaded from ``.mdclint.toml`` or ``pyproject.toml [tool.mdclint]``
    via :func:`load_config`.

    Example ``pyproject.toml``::

        [tool.mdclint]
        profile = "recommended"
        max_description_length = 100
        exclude_rules = ["ST-007"]
        exclude = ["drafts/*"]

    """

    # --- Mode ---

    strict: bool = False
    """Enforce full schema conformance.

    Free-form documents become errors, example blocks must carry both
    demonstrations and every requirement needs a correct example.
    """

    # --- Rule filtering ---

    min_severity: Severity = Severity.INFO
    """Minimum severity to record. Findings below this are silently skipped."""

    include_rules: frozenset[str] = field(default_factory=frozenset)
    """Allowlist: if non-empty, only rules matching these patterns are active.
    Applied before ``exclude_rules``.

    Supports both exact IDs (``"FM-002"``) and glob patterns (``"FM-*"``).
    """

    exclude_rules: frozenset[str] = field(default_factory=frozenset)
    """Denylist: rule IDs to suppress. Applied after ``include_rules``.

    Supports both exact IDs (``"ST-007"``) and glob patterns (``"EX-*"``).
    """

    categories: frozenset[str] = field(default_factory=frozenset)
    """Layer prefixes to include (e.g. ``{"frontmatter"}``).
    Empty means all categories.

    Known layer values:
    - ``"general"``: G-xxx document-level rules
    - ``"frontmatter"``: FM-xxx front-matter rules
    - ``"structure"``: ST-xxx body structure rules
    - ``"examples"``: EX-xxx example block rules
    """

    # --- Thresholds ---

    max_description_length: int = 120
    """FM-007: Recommended maximum front-matter description length."""

    max_description_sentences: int = 2
    """ST-007: Sentences allowed in a requirement description."""

    # --- File discovery ---

    extensions: tuple[str, ...] = (".md", ".mdc")
    """File suffixes collected when walking a directory."""

    exclude: tuple[str, ...] = (".git", "node_modules")
    """Path globs skipped when walking a directory.

    A pattern matches either a single path component or the path relative
    to the walked root.
    """

    jobs: int | None = None
    """Worker threads for a batch. ``None`` uses the CPU count."""

    # --- Pre-compiled lookups (not part of config equality or hash) ---

    _exact_include: frozenset[str] = field(
        default_factory=frozenset, init=False, compare=False, hash=False, repr=False
    )
    _glob_include: tuple[re.Pattern[str], ...] = field(
        default=(), init=False, compare=False, hash=False, repr=False
    )
    _exact_exclude: frozenset[str] = field(
        default_factory=frozenset, init=False, compare=False, hash=False, repr=False
    )
    _glob_exclude: tuple[re.Pattern[str], ...] = field(
        default=(), init=False, compare=False, hash=False, repr=False
    )

    def __post_init__(self) -> None:
        exact_inc = frozenset(p for p in self.include_rules if not _is_glob(p))
        glob_inc = tuple(
            re.compile(fnmatch.translate(p)) for p in self.include_rules if _is_glob(p)
        )
        exact_exc = frozenset(p for p in self.exclude_rules if not _is_glob(p))
        glob_exc = tuple(
            re.compile(fnmatch.translate(p)) for p in self.exclude_rules if _is_glob(p)
        )
        object.__setattr__(self, "_exact_include", exact_inc)
        object.__setattr__(self, "_glob_include", glob_inc)
        object.__setattr__(self, "_exact_exclude", exact_exc)
        object.__setattr__(self, "_glob_exclude", glob_exc)

    # MdclintConfig is frozen and long-lived (one per batch),
    # so the cache is bounded by O(N_configs x N_rules x N_severities) entries.
    @functools.cache  # noqa: B019
    def allows(self, rule: Rule, severity: Severity | None = None) -> bool:
        """Return ``True`` if *rule* passes all active filters.

        *severity* is the effective severity of the finding when it differs
        from the rule default (strict-mode escalation, free-form downgrade).

        Evaluation order:
        1. ``min_severity``: findings below this level are excluded.
        2. ``categories``: if non-empty, rule's layer must match a prefix.
        3. ``include_rules``: if non-empty, rule ID must be in the allowlist.
        4. ``exclude_rules``: rule ID must not be in the denylist.

        """
        effective = severity or rule.severity
        if SEVERITY_LEVEL[effective] < SEVERITY_LEVEL[self.min_severity]:
            return False

        if self.categories and not any(
            rule.layer == c or rule.layer.startswith(c + ".") for c in self.categories
        ):
            return False

        if self.include_rules and (
            rule.id not in self._exact_include
            and not any(p.match(rule.id) for p in self._glob_include)
        ):
            return False

        if rule.id in self._exact_exclude:
            return False

        return not any(p.match(rule.id) for p in self._glob_exclude)


# Built-in profiles: named MdclintConfig instances for common use cases.
BUILTIN_PROFILES: dict[str, MdclintConfig] = {
    "strict": MdclintConfig(strict=True),
    "recommended": MdclintConfig(),
    "minimal": MdclintConfig(min_severity=Severity.ERROR),
}


def load_config(path: Path | str | None = None) -> MdclintConfig:
    """Load :class:`MdclintConfig` from a TOML file.

    When ``path`` is ``None``, walks up from the current directory looking for
    ``.mdclint.toml`` first, then ``pyproject.toml [tool.mdclint]``.  A
    ``pyproject.toml`` without a ``[tool.mdclint]`` section acts as a project
    root marker and stops the search.

    Args:
        path: Explicit path to a config file (``.mdclint.toml``-style or
              ``pyproject.toml``).  If ``None``, auto-detects by walking up.

    Returns:
        :class:`MdclintConfig` populated from the file, with defaults for any
        missing keys.

    Raises:
        :class:`ConfigError`: If the file contains an unrecognised value
            (e.g. ``profile = "typo"`` or ``min_severity = "fatal"``).

    """
    if path is not None:
        resolved = Path(path)
        data = _read_file(resolved) if resolved.exists() else {}
    else:
        data = _find_config()

    return _parse_config(data)


def _find_config() -> dict[str, Any]:
    """Walk up from CWD looking for a config file."""
    current = Path.cwd()
    while True:
        mdclint_toml = current / ".mdclint.toml"
        if mdclint_toml.exists():
            return _read_file(mdclint_toml)

        pyproject = current / "pyproject.toml"
        if pyproject.exists():
            # pyproject.toml marks the project root; stop here regardless of
            # whether [tool.mdclint] is present.
            return _read_file(pyproject)

        parent = current.parent
        if parent == current:  # reached filesystem root
            break
        current = parent

    return {}


def _read_file(path: Path) -> dict[str, Any]:
    """Read a TOML file and return the mdclint-relevant section."""
    try:
        with path.open("rb") as f:
            raw: dict[str, Any] = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
    if path.name == "pyproject.toml":
        tool: dict[str, Any] = raw.get("tool", {})
        section: dict[str, Any] = tool.get("mdclint", {})
        return section
    return raw


def _parse_config(data: dict[str, Any]) -> MdclintConfig:
    """Parse raw key/value dict into :class:`MdclintConfig`.

    If ``profile`` is present, the corresponding :data:`BUILTIN_PROFILES`
    entry is used as the base; explicit keys in *data* override it.

    Raises:
        :class:`ConfigError`: On unrecognised enum values or unknown profiles.

    """
    if (profile_name := data.get("profile")) is not None:
        base = BUILTIN_PROFILES.get(str(profile_name))
        if base is None:
            known = ", ".join(f'"{p}"' for p in BUILTIN_PROFILES)
            raise ConfigError(f"Unknown profile {profile_name!r}. Known profiles: {known}")
    else:
        base = MdclintConfig()

    kwargs: dict[str, Any] = {}
    try:
        if (v := data.get("strict")) is not None:
            if not isinstance(v, bool):
                raise TypeError(f"strict must be a boolean, got {type(v).__name__}")
            kwargs["strict"] = v
        if (v := data.get("min_severity")) is not None:
            kwargs["min_severity"] = Severity(v)
        if (v := data.get("max_description_length")) is not None:
            kwargs["max_description_length"] = int(v)
        if (v := data.get("max_description_sentences")) is not None:
            kwargs["max_description_sentences"] = int(v)
        if (v := data.get("jobs")) is not None:
            kwargs["jobs"] = int(v)
    except (ValueError, TypeError) as exc:
        raise ConfigError(str(exc)) from exc

    if kwargs.get("jobs", 1) < 1:
        raise ConfigError(f"jobs must be at least 1, got {kwargs['jobs']}")

    if isinstance(rules := data.get("include_rules"), list):
        kwargs["include_rules"] = frozenset(str(r) for r in rules)
    if isinstance(rules := data.get("exclude_rules"), list):
        kwargs["exclude_rules"] = frozenset(str(r) for r in rules)
    if isinstance(cats := data.get("categories"), list):
        kwargs["categories"] = frozenset(str(c) for c in cats)
    if isinstance(exts := data.get("extensions"), list):
        kwargs["extensions"] = tuple(_normalize_extension(str(e)) for e in exts)
    if isinstance(excl := data.get("exclude"), list):
        kwargs["exclude"] = tuple(str(e) for e in excl)

    return dataclasses.replace(base, **kwargs)


def _normalize_extension(ext: str) -> str:
    return ext if ext.startswith(".") else f".{ext}"
