from mdclint.core._types import Severity
from mdclint.core.rule import Rule

_LAYER = "general"

G_001 = Rule(
    "G-001",
    "UnreadableFile",
    Severity.ERROR,
    "File cannot be read",
    hint="Check permissions and that the file is UTF-8 encoded",
    layer=_LAYER,
)
G_002 = Rule(
    "G-002",
    "FreeFormDocument",
    Severity.INFO,
    "free-form document; schema checks skipped",
    layer=_LAYER,
)
G_003 = Rule(
    "G-003",
    "MissingRuleRoot",
    Severity.ERROR,
    "Document has no <rule> root element",
    hint="Wrap the body in <rule>...</rule> or run without --strict",
    layer=_LAYER,
)
G_004 = Rule(
    "G-004",
    "InternalError",
    Severity.ERROR,
    "Validator failed on this document",
    hint="This is a bug in mdclint; run with --verbose for the traceback",
    layer=_LAYER,
)
