"""Base validator interface and registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdclint.core.config import MdclintConfig
    from mdclint.core.context import DocumentContext
    from mdclint.core.document import RuleDocument


class BaseValidator:
    """Base class for all rule document validators.

    Subclasses override one or more methods. Each method receives the
    DocumentContext which collects findings.
    """

    def validate_front_matter(self, ctx: DocumentContext, document: RuleDocument) -> None:
        """Validate the front-matter. Called for every parsed document."""

    def validate_body(self, ctx: DocumentContext, document: RuleDocument) -> None:
        """Validate the ``<rule>`` body. Called only for rooted documents."""


class ValidatorRegistry:
    """Ordered registry of validators."""

    def __init__(self) -> None:
        self._validators: list[BaseValidator] = []

    def register(self, validator: BaseValidator) -> None:
        self._validators.append(validator)

    def get_validators(self) -> list[BaseValidator]:
        return list(self._validators)


def create_default_registry(config: MdclintConfig | None = None) -> ValidatorRegistry:
    """Create a registry with all built-in validators."""
    from mdclint.schema import RULE_FILE
    from mdclint.validators.examples import ExampleValidator
    from mdclint.validators.frontmatter import FrontMatterValidator
    from mdclint.validators.structure import StructureValidator

    registry = ValidatorRegistry()
    registry.register(FrontMatterValidator(RULE_FILE, config=config))
    registry.register(StructureValidator(RULE_FILE, config=config))
    registry.register(ExampleValidator())
    return registry
