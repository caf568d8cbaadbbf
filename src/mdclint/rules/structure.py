from mdclint.core._types import Severity
from mdclint.core.rule import Rule

_LAYER = "structure"

ST_001 = Rule(
    "ST-001",
    "MissingTitle",
    Severity.ERROR,
    "Rule document has no <meta><title>",
    hint="Add <meta><title>...</title></meta> as the first child of <rule>",
    layer=_LAYER,
)
ST_002 = Rule(
    "ST-002",
    "MissingRequirements",
    Severity.ERROR,
    "Rule document has no <requirements> block",
    hint="Add <requirements> with at least one <requirement>",
    layer=_LAYER,
)
ST_006 = Rule(
    "ST-006",
    "EmptyRequirementDescription",
    Severity.ERROR,
    "Requirement has no description",
    hint="Add <description> stating the requirement in one sentence",
    layer=_LAYER,
)
ST_007 = Rule(
    "ST-007",
    "CompoundDescription",
    Severity.INFO,
    "Requirement description spans several statements",
    hint="Split unrelated statements into separate requirements",
    layer=_LAYER,
)
ST_008 = Rule(
    "ST-008",
    "UnclosedTag",
    Severity.ERROR,
    "Element is never closed",
    layer=_LAYER,
)
ST_009 = Rule(
    "ST-009",
    "UnexpectedClosingTag",
    Severity.WARNING,
    "Closing tag has no matching opening tag",
    layer=_LAYER,
)
ST_010 = Rule(
    "ST-010",
    "UnknownSection",
    Severity.INFO,
    "Unexpected element directly under <rule>",
    hint="Expected <meta>, <requirements>, <grammar>, <context> or <references>",
    layer=_LAYER,
)
ST_011 = Rule(
    "ST-011",
    "InvalidGrammarPattern",
    Severity.ERROR,
    "Grammar pattern is not a valid regular expression",
    layer=_LAYER,
)
ST_014 = Rule(
    "ST-014",
    "SectionOrder",
    Severity.WARNING,
    "<requirements> appears before <meta>",
    hint="Put <meta> first so the title and scope are read before the requirements",
    layer=_LAYER,
)
ST_015 = Rule(
    "ST-015",
    "EmptyRequirements",
    Severity.WARNING,
    "<requirements> contains no requirement",
    layer=_LAYER,
)
ST_016 = Rule(
    "ST-016",
    "UnclosedCdata",
    Severity.ERROR,
    "CDATA section is never terminated",
    hint="Close the section with ']]>'",
    layer=_LAYER,
)
