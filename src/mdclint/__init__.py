from importlib.metadata import version

from mdclint.core._types import Severity
from mdclint.core.config import BUILTIN_PROFILES, ConfigError, MdclintConfig, load_config
from mdclint.core.context import DocumentContext
from mdclint.core.document import FrontMatter, RuleDocument
from mdclint.core.finding import Finding, MalformedFrontMatterError, RuleFileError
from mdclint.core.pipeline import check_file, check_text, parse_document, run_check
from mdclint.core.report import BatchSummary, Report
from mdclint.core.rule import Rule
from mdclint.validators.base import BaseValidator, ValidatorRegistry

__version__ = version("mdclint")


__all__ = [
    "BUILTIN_PROFILES",
    "BaseValidator",
    "BatchSummary",
    "ConfigError",
    "DocumentContext",
    "Finding",
    "FrontMatter",
    "MalformedFrontMatterError",
    "MdclintConfig",
    "Report",
    "Rule",
    "RuleDocument",
    "RuleFileError",
    "Severity",
    "ValidatorRegistry",
    "__version__",
    "check_file",
    "check_text",
    "load_config",
    "parse_document",
    "run_check",
]
