"""Exceptions raised while reading, checking and building the stack."""

from typing import List


class StackError(Exception):
    """Base exception for stack declaration errors."""


class ConfigurationError(StackError):
    """The declaration file is malformed or missing required keys."""


class DuplicateResourceError(StackError):
    """Raised when two declared resources share the same local name."""

    def __init__(self, name: str):
        super().__init__(f"Duplicate resource name: {name}")
        self.name = name


class UnknownResourceTypeError(StackError):
    """Raised when a resource type has no matching provider class."""

    def __init__(self, resource_type: str):
        super().__init__(f"Unknown resource type: {resource_type}")
        self.resource_type = resource_type


class DependencyCycleError(StackError):
    """Raised when resource references form a cycle."""

    def __init__(self, names: List[str]):
        msg = "Dependency cycle detected"
        if names:
            msg += f": {', '.join(names)}"
        super().__init__(msg)
        self.names = names


class ValidationError(StackError):
    """One or more declarations failed the static checks."""

    def __init__(self, problems: List[str]):
        self.problems = problems
        msg = "Validation failed:\n" + "\n".join(f"  - {p}" for p in problems)
        super().__init__(msg)
