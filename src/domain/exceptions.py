"""
domain.exceptions - Custom exception hierarchy for the settings menu agent.

All request-aborting errors inherit from DomainError so adapters can catch
broad or specific exceptions as needed. RoleContractError is deliberately
outside that tree: it signals a programming error, not a user-facing one.
"""


class DomainError(Exception):
    """Base exception for all domain-level errors."""


class DispatchError(DomainError):
    """Raised when a requested tool call cannot be dispatched."""


class ToolNotFoundError(DispatchError):
    """Raised when the requested tool name is not in the registry."""

    def __init__(self, name: str):
        super().__init__(f"Tool '{name}' not registered")
        self.name = name


class ToolPermissionError(DispatchError):
    """Raised when the caller's permissions do not allow the requested tool."""

    def __init__(self, name: str, permission: str, role: str):
        super().__init__(
            f"Tool '{name}' requires '{permission}', which role '{role}' lacks"
        )
        self.name = name
        self.permission = permission
        self.role = role


class SchemaViolationError(DispatchError):
    """Raised when tool parameters fail validation against the tool's schema."""

    def __init__(self, name: str, detail: str):
        super().__init__(f"Invalid parameters for tool '{name}': {detail}")
        self.name = name
        self.detail = detail


class CompletionError(DomainError):
    """Raised when the completion service call fails."""


class CompletionDecodeError(CompletionError):
    """Raised when a completion has neither a tool call nor text."""


class CompletionTimeoutError(CompletionError):
    """Raised when the completion service does not answer in time."""


class ToolExecutionError(DomainError):
    """Raised when a tool fails while running (e.g. an upstream fetch)."""


class ExecutorStateError(DomainError):
    """Raised when the executor reaches a state with no valid transition."""


class RoleContractError(ValueError):
    """Raised when a role outside the closed enumeration reaches a service."""
