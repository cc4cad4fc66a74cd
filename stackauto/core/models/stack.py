"""
Stack identity and lifecycle enums.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


def fully_qualified_stack_name(org: str, project: str, stack: str) -> str:
    """Combine the three parts of a stack identity into ``org/project/stack``."""
    return f"{org}/{project}/{stack}"


class StackIdentity(BaseModel):
    """The (organization, project, stack) triple that names a stack."""

    model_config = ConfigDict(frozen=True)

    organization: str
    project: str
    stack: str

    @property
    def qualified_name(self) -> str:
        return fully_qualified_stack_name(self.organization, self.project, self.stack)

    @classmethod
    def parse(cls, qualified_name: str) -> StackIdentity:
        """Split ``org/project/stack`` back into an identity.

        Raises:
            ValueError: If the name does not have exactly three non-empty parts.
        """
        parts = qualified_name.split("/")
        if len(parts) != 3 or not all(parts):
            raise ValueError(
                f"Expected a fully qualified stack name 'org/project/stack', got {qualified_name!r}"
            )
        return cls(organization=parts[0], project=parts[1], stack=parts[2])

    def __str__(self) -> str:
        return self.qualified_name


class StackInitMode(StrEnum):
    """How the backing stack is established when a Stack is built."""

    CREATE = "create"
    SELECT = "select"
    UPSERT = "upsert"


class StackState(StrEnum):
    """Construction states of a Stack object."""

    UNINITIALIZED = "uninitialized"
    ESTABLISHING = "establishing"
    READY = "ready"
