from mdclint.core.rule import Rule
from mdclint.schema._compiler import compile_schema
from mdclint.schema._rule_file import RULE_FILE_SCHEMA
from mdclint.schema._schema import CompiledSchema

RULE_FILE: CompiledSchema = compile_schema(RULE_FILE_SCHEMA)

SCHEMA_RULES: dict[str, Rule] = dict(RULE_FILE.rules)

__all__ = ["RULE_FILE", "SCHEMA_RULES"]
