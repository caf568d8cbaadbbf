from mdclint.core._types import Severity
from mdclint.core.rule import Rule

_LAYER = "examples"

EX_001 = Rule(
    "EX-001",
    "EmptyExample",
    Severity.WARNING,
    "<example> has neither a correct nor an incorrect demonstration",
    hint="Add <correct-example> and <incorrect-example> children",
    layer=_LAYER,
)
EX_002 = Rule(
    "EX-002",
    "IncompleteExample",
    Severity.WARNING,
    "<example> lacks its correct or incorrect counterpart",
    layer=_LAYER,
)
EX_003 = Rule(
    "EX-003",
    "IncompleteExample",
    Severity.WARNING,
    "Demonstration is missing conditions or expected-result",
    hint="Add conditions=\"...\" and expected-result=\"...\" attributes",
    layer=_LAYER,
)
EX_004 = Rule(
    "EX-004",
    "UnbalancedFence",
    Severity.ERROR,
    "Code fence is opened but never closed",
    hint="Close the block with a matching ``` or ~~~ line",
    layer=_LAYER,
)
EX_005 = Rule(
    "EX-005",
    "UnwrappedMultiline",
    Severity.WARNING,
    "Multiline demonstration is not wrapped in CDATA or a code fence",
    hint="Wrap multiline content in <![CDATA[ ... ]]>",
    layer=_LAYER,
)
EX_006 = Rule(
    "EX-006",
    "MissingCorrectExample",
    Severity.ERROR,
    "Requirement has no correct example",
    hint="Add an <example> with a <correct-example>",
    layer=_LAYER,
)
