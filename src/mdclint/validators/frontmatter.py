from mdclint.core.config import MdclintConfig
from mdclint.core.context import DocumentContext
from mdclint.core.document import Entry, RuleDocument
from mdclint.rules.frontmatter import FM_007, FM_008, FM_009
from mdclint.schema._schema import CompiledSchema
from mdclint.validators.base import BaseValidator


class FrontMatterValidator(BaseValidator):
    """Validates front-matter keys and values against a CompiledSchema."""

    def __init__(self, compiled: CompiledSchema, config: MdclintConfig | None = None) -> None:
        cfg = config or MdclintConfig()
        self._allowed = compiled.allowed_keys
        self._unknown_key = compiled.unknown_key_rule
        self._checks = compiled.front_matter_fns
        self._max_length = cfg.max_description_length

    def validate_front_matter(self, ctx: DocumentContext, document: RuleDocument) -> None:
        fm = document.front_matter
        if fm is None:
            return

        for line, text in document.invalid_lines:
            ctx.finding(FM_009, f"Not a 'key: value' pair: {text.strip()!r}", line=line)

        fields: dict[str, Entry] = {}
        for entry in document.entries:
            if entry.key not in self._allowed:
                if self._unknown_key is not None:
                    ctx.finding(
                        self._unknown_key,
                        f"Unknown front-matter key '{entry.key}'",
                        line=entry.line,
                    )
                continue
            if entry.key in fields:
                ctx.finding(
                    FM_008,
                    f"Front-matter key '{entry.key}' repeats line {fields[entry.key].line}",
                    line=entry.line,
                )
                continue
            fields[entry.key] = entry

        for check in self._checks:
            check(ctx, fields, fm.start_line)

        if len(fm.description) > self._max_length:
            ctx.finding(
                FM_007,
                f"Description is {len(fm.description)} characters "
                f"(recommended maximum {self._max_length})",
                line=fields["description"].line,
            )
