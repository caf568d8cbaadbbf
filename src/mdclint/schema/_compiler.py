from typing import Any

from mdclint.core._types import Severity
from mdclint.core.context import DocumentContext
from mdclint.core.rule import Rule
from mdclint.schema._checks import CheckSpec, FieldChoice, FieldRequired, FieldValue
from mdclint.schema._schema import CheckFn, CompiledSchema, DocumentSchema, Fields


def compile_schema(schema: DocumentSchema) -> CompiledSchema:
    """Compile a DocumentSchema into rules + dispatch tables."""
    rules: dict[str, Rule] = {}

    front_matter_fns = tuple(
        _compile_check(check, "front-matter", schema.front_matter_layer, rules)
        for check in schema.front_matter_checks
    )

    unknown_key_rule = _make_unknown_key_rule(
        schema.unknown_key_rule_id,
        schema.unknown_key_summary,
        schema.unknown_key_hint,
        schema.front_matter_keys,
        schema.front_matter_layer,
        rules,
    )

    element_layer = schema.element_layer or schema.front_matter_layer
    element_dispatch: dict[str, list[CheckFn]] = {}
    for element in schema.elements:
        fns = element_dispatch.setdefault(element.tag, [])
        for check in element.checks:
            fns.append(_compile_check(check, f"<{element.tag}>", element_layer, rules))

    return CompiledSchema(
        rules=rules,
        allowed_keys=frozenset(schema.front_matter_keys),
        unknown_key_rule=unknown_key_rule,
        front_matter_fns=front_matter_fns,
        element_dispatch={k: tuple(v) for k, v in element_dispatch.items()},
    )


def _make_unknown_key_rule(
    rule_id: str,
    summary: str,
    hint: str,
    keys: tuple[str, ...],
    layer: str,
    rules: dict[str, Rule],
) -> Rule | None:
    if not rule_id:
        return None
    if not hint and keys:
        hint = f"Allowed keys: {', '.join(keys)}"
    rule = Rule(
        id=rule_id,
        name="UnknownKey",
        severity=Severity.ERROR,
        summary=summary or "Unknown front-matter key",
        hint=hint,
        layer=layer,
    )
    rules[rule_id] = rule
    return rule


def _register(rules: dict[str, Rule], rule: Rule) -> Rule:
    if rule.id in rules and rules[rule.id] != rule:
        msg = f"Duplicate rule ID: {rule.id}"
        raise ValueError(msg)
    rules[rule.id] = rule
    return rule


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _compile_check(
    check: CheckSpec,
    owner: str,
    layer: str,
    rules: dict[str, Rule],
) -> CheckFn:
    match check:
        case FieldRequired(
            field=field,
            rule_id=rid,
            name=name,
            severity=sev,
            summary=summary,
            hint=hint,
            allow_empty=allow_empty,
        ):
            summary = summary or f"{owner} missing '{field}'"
            rule = _register(rules, Rule(rid, name, sev, summary, hint=hint, layer=layer))

            def fn_required(ctx: DocumentContext, fields: Fields, line: int) -> None:
                entry = fields.get(field)
                if entry is None:
                    ctx.finding(rule, line=line)
                elif not allow_empty and _is_blank(entry.value):
                    ctx.finding(rule, f"{summary} (value is empty)", line=entry.line)

            return fn_required

        case FieldValue(
            field=field,
            check=check_fn,
            rule_id=rid,
            name=name,
            severity=sev,
            summary=summary,
            hint=hint,
        ):
            summary = summary or f"Invalid {owner} '{field}' value"
            rule = _register(rules, Rule(rid, name, sev, summary, hint=hint, layer=layer))

            def fn_value(ctx: DocumentContext, fields: Fields, line: int) -> None:
                entry = fields.get(field)
                if entry is not None:
                    result = check_fn(entry)
                    if result is not None:
                        ctx.finding(rule, result, line=entry.line)

            return fn_value

        case FieldChoice():
            return _compile_field_choice(check, owner, layer, rules)


def _compile_field_choice(
    check: FieldChoice,
    owner: str,
    layer: str,
    rules: dict[str, Rule],
) -> CheckFn:
    field = check.field
    choices = tuple(c.lower() for c in check.choices)
    expected = ", ".join(f"'{c}'" for c in choices)

    if check.severity == Severity.ERROR:
        pattern = f"{owner} '{field}' must be one of {expected}"
    else:
        pattern = f"{owner} '{field}' should be one of {expected}"

    rule = _register(
        rules,
        Rule(
            check.rule_id,
            check.name,
            check.severity,
            check.summary or pattern,
            hint=check.hint,
            layer=layer,
        ),
    )
    required = check.required

    def fn_choice(ctx: DocumentContext, fields: Fields, line: int) -> None:
        entry = fields.get(field)
        if entry is None:
            if required:
                ctx.finding(rule, f"{pattern}, got nothing", line=line)
            return
        value = str(entry.value).strip().lower()
        if value not in choices:
            ctx.finding(rule, f"{pattern}, got '{entry.value}'", line=entry.line)

    return fn_choice
