from mdclint.core._types import Severity
from mdclint.core.rule import Rule

_LAYER = "frontmatter"

FM_001 = Rule(
    "FM-001",
    "MalformedFrontMatter",
    Severity.ERROR,
    "Front-matter block is missing or unterminated",
    hint="Start the file with a '---' line and close the block with another '---' line",
    layer=_LAYER,
)
FM_007 = Rule(
    "FM-007",
    "DescriptionTooLong",
    Severity.WARNING,
    "Description is longer than recommended",
    hint="Keep descriptions short so rule selection stays accurate",
    layer=_LAYER,
)
FM_008 = Rule(
    "FM-008",
    "DuplicateKey",
    Severity.ERROR,
    "Front-matter key appears more than once",
    hint="Only the first occurrence is used",
    layer=_LAYER,
)
FM_009 = Rule(
    "FM-009",
    "InvalidFrontMatterLine",
    Severity.ERROR,
    "Front-matter line is not a 'key: value' pair",
    layer=_LAYER,
)
FM_010 = Rule(
    "FM-010",
    "NoFrontMatter",
    Severity.INFO,
    "Document has no front-matter block",
    layer=_LAYER,
)
