import logging
import os
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from mdclint.core.config import MdclintConfig
from mdclint.core.context import DocumentContext, FindingCallback
from mdclint.core.document import RuleDocument
from mdclint.core.finding import MalformedFrontMatterError
from mdclint.core.report import BatchSummary, Report
from mdclint.parser.frontmatter import build_front_matter, split_front_matter
from mdclint.parser.markup import has_rule_root, parse_markup
from mdclint.parser.sections import build_sections
from mdclint.rules.frontmatter import FM_001, FM_010
from mdclint.rules.general import G_001, G_002, G_003, G_004
from mdclint.validators.base import ValidatorRegistry, create_default_registry

logger = logging.getLogger("mdclint")


def parse_document(text: str, *, path: str = "<string>") -> RuleDocument:
    """Parse *text* into a :class:`RuleDocument`.

    Raises:
        :class:`MalformedFrontMatterError`: The front-matter block is
            never closed.

    """
    split = split_front_matter(text)
    rooted = has_rule_root(split.body)

    markup = parse_markup(split.body, first_line=split.body_line) if rooted else None
    block = split.block
    return RuleDocument(
        path=path,
        front_matter=build_front_matter(block) if block is not None else None,
        body=split.body,
        body_line=split.body_line,
        entries=block.entries if block is not None else (),
        invalid_lines=block.invalid_lines if block is not None else (),
        rooted=rooted,
        markup=markup,
        sections=build_sections(markup) if markup is not None else (),
    )


def check_text(
    text: str,
    *,
    path: str = "<string>",
    config: MdclintConfig | None = None,
    strict: bool | None = None,
    on_finding: FindingCallback | None = None,
    registry: ValidatorRegistry | None = None,
) -> Report:
    """Validate one rule document.

    Args:
        text: The document source.
        path: Path reported in findings.
        config: Rule filter settings and thresholds. Defaults to ``MdclintConfig()``.
        strict: Overrides ``config.strict`` when not ``None``.
        on_finding: Optional callback for each finding (called in real-time).
        registry: Custom validator registry. Uses defaults if None.

    Returns:
        The document's :class:`Report`.

    Example::

        from mdclint import check_text

        report = check_text(source, path="rules/python.mdc")
        assert report.passed

    """
    _config = config or MdclintConfig()
    _strict = _config.strict if strict is None else strict
    if registry is None:
        registry = create_default_registry(config=_config)

    def make_context(rooted: bool) -> DocumentContext:
        return DocumentContext(
            path=path,
            strict=_strict,
            advisory=not _strict and not rooted,
            _rule_allowed=_config.allows,
            _on_finding=on_finding,
        )

    try:
        document = parse_document(text, path=path)
    except MalformedFrontMatterError as exc:
        ctx = make_context(has_rule_root(text))
        ctx.finding(FM_001, str(exc), line=exc.line)
        return _finish(ctx)

    ctx = make_context(document.rooted)

    if document.front_matter is None:
        if document.rooted or _strict:
            ctx.finding(FM_001, "Document has no front-matter block", line=1)
            return _finish(ctx)
        ctx.finding(FM_010, line=1)

    validators = registry.get_validators()
    for v in validators:
        try:
            v.validate_front_matter(ctx, document)
        except Exception:
            logger.exception("Validator %s.validate_front_matter() raised", type(v).__name__)
            ctx.finding(G_004, f"{type(v).__name__} failed on the front-matter", line=1)

    if not document.rooted:
        if _strict:
            ctx.finding(G_003, line=document.body_line)
        else:
            ctx.finding(G_002, line=document.body_line)
        return _finish(ctx)

    for v in validators:
        try:
            v.validate_body(ctx, document)
        except Exception:
            logger.exception("Validator %s.validate_body() raised", type(v).__name__)
            ctx.finding(G_004, f"{type(v).__name__} failed on the body", line=document.body_line)

    return _finish(ctx)


def check_file(
    path: Path | str,
    *,
    config: MdclintConfig | None = None,
    strict: bool | None = None,
    on_finding: FindingCallback | None = None,
    registry: ValidatorRegistry | None = None,
) -> Report:
    """Read *path* as UTF-8 and validate it.

    An unreadable file yields a single ``G-001`` finding instead of raising.
    """
    _config = config or MdclintConfig()
    name = str(path)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Cannot read %s: %s", name, exc)
        ctx = DocumentContext(path=name, _rule_allowed=_config.allows, _on_finding=on_finding)
        ctx.finding(G_001, f"Cannot read file: {exc}")
        return _finish(ctx)

    return check_text(
        text,
        path=name,
        config=_config,
        strict=strict,
        on_finding=on_finding,
        registry=registry,
    )


def run_check(
    files: Iterable[Path | str],
    *,
    config: MdclintConfig | None = None,
    strict: bool | None = None,
    jobs: int | None = None,
) -> BatchSummary:
    """Validate *files* on a thread pool and collect a :class:`BatchSummary`.

    Reports are ordered by path, so the result does not depend on
    scheduling.
    """
    _config = config or MdclintConfig()
    paths = list(files)
    workers = jobs or _config.jobs or os.cpu_count() or 1
    registry = create_default_registry(config=_config)

    logger.debug("Checking %d files with %d workers", len(paths), workers)

    def check_one(p: Path | str) -> Report:
        return check_file(p, config=_config, strict=strict, registry=registry)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        reports = list(pool.map(check_one, paths))

    summary = BatchSummary(sorted(reports, key=lambda r: r.document_path))
    logger.debug("Batch done: %s", summary.summary_line())
    return summary


def _finish(ctx: DocumentContext) -> Report:
    for finding in ctx.findings:
        logger.debug(
            "[%s] %s %s:%s: %s",
            finding.rule_id,
            finding.severity,
            finding.path,
            finding.line,
            finding.message,
        )
    return Report.from_findings(ctx.path, ctx.findings)
