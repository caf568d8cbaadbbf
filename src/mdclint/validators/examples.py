from mdclint.core.context import DocumentContext
from mdclint.core.document import Example, ExamplePair, RuleDocument
from mdclint.parser.fences import scan_fences, unclosed_fence
from mdclint.rules.examples import EX_001, EX_002, EX_003, EX_004, EX_005, EX_006
from mdclint.validators.base import BaseValidator

_REQUIRED_ATTRS = ("conditions", "expected-result")


class ExampleValidator(BaseValidator):
    """Validates ``<example>`` blocks: pairing, attributes and wrapping.

    Pairing and attribute checks only run in strict mode; fence balance is
    checked in every mode since an open fence swallows the rest of the
    rendered document.
    """

    def validate_body(self, ctx: DocumentContext, document: RuleDocument) -> None:
        for pair in document.examples:
            self._check_pair(ctx, pair)

        if not ctx.strict:
            return
        for requirement in document.requirements:
            if not requirement.has_correct_example:
                ctx.finding(EX_006, line=requirement.line, end_line=requirement.end_line)

    def _check_pair(self, ctx: DocumentContext, pair: ExamplePair) -> None:
        if not pair.demos:
            ctx.finding(
                EX_001,
                line=pair.line,
                end_line=pair.end_line,
                severity=ctx.strict_severity(),
            )
            return

        if ctx.strict:
            if pair.correct is None:
                ctx.finding(EX_002, "<example> has no <correct-example>", line=pair.line)
            elif pair.incorrect is None:
                ctx.finding(EX_002, "<example> has no <incorrect-example>", line=pair.line)

        for demo in pair.demos:
            self._check_demo(ctx, demo)

    def _check_demo(self, ctx: DocumentContext, demo: Example) -> None:
        tag = f"<{demo.kind}-example>"
        if demo.title:
            tag = f"{tag} {demo.title!r}"
        if ctx.strict:
            absent = [a for a in _REQUIRED_ATTRS if not demo.attrs.get(a, "").strip()]
            if absent:
                ctx.finding(EX_003, f"{tag} is missing {', '.join(absent)}", line=demo.line)

        fence = unclosed_fence(demo.content)
        if fence is not None:
            ctx.finding(
                EX_004,
                f"Code fence {fence.char * fence.length!r} in {tag} is never closed",
                line=demo.content_line + fence.line,
            )
        elif demo.multiline and not demo.has_cdata and not scan_fences(demo.content):
            ctx.finding(
                EX_005,
                f"Multiline {tag} is not wrapped in CDATA or a code fence",
                line=demo.line,
                end_line=demo.end_line,
            )
