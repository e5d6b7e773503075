"""
Tool contract shared by the tuner tools.

A tool is a named, self-describing operation (`detect_pitch` over a file,
`analyze_frequency` for a single Hz value) that /tools/call and the registry
can run from plain keyword arguments, usually decoded from JSON. Calling a
tool never raises: bad arguments and failures come back as a ToolResult with
success=False.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ToolParameter:
    """One keyword argument of a tool.

    `type` is checked with isinstance, except that a float parameter also
    takes a JSON integer (440 for 440.0). Booleans are never numbers here.
    """

    name: str
    type: type
    description: str
    required: bool = True
    default: Any = None

    def validate(self, value: Any) -> tuple[bool, str | None]:
        """Check one argument. Returns (ok, error message or None)."""
        if value is None:
            if self.required:
                return False, f"Required parameter '{self.name}' is missing"
            return True, None

        if self.type is float and isinstance(value, int) and not isinstance(value, bool):
            return True, None
        if not isinstance(value, self.type):
            return (
                False,
                f"Parameter '{self.name}' must be {self.type.__name__}, got {type(value).__name__}",
            )
        return True, None


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool call.

    `data` holds the reading or tuning summary on success, `error` a message
    on failure. `metadata` carries the context of the call (file, preset,
    tolerance) and is never needed to interpret `data`.
    """

    success: bool
    data: Any = None
    error: str | None = None
    metadata: dict[str, Any] | None = None


class MusicalTool(ABC):
    """Base class for the tuner tools.

    Subclasses provide `name`, `description`, `parameters` and `execute()`.
    Callers go through `__call__`, which validates the arguments first and
    turns an exception from `execute()` into a failed ToolResult.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Registry key, snake_case."""

    @property
    @abstractmethod
    def description(self) -> str:
        """One paragraph shown by /tools/list."""

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """Accepted keyword arguments, required ones first."""

    def validate_inputs(self, **kwargs) -> tuple[bool, str | None]:
        """Validate every declared parameter; stops at the first failure."""
        for param in self.parameters:
            is_valid, error = param.validate(kwargs.get(param.name))
            if not is_valid:
                return False, error
        return True, None

    @abstractmethod
    def execute(self, **kwargs) -> ToolResult:
        """Run the tool. Arguments have already passed validate_inputs()."""

    def __call__(self, **kwargs) -> ToolResult:
        is_valid, error = self.validate_inputs(**kwargs)
        if not is_valid:
            return ToolResult(success=False, error=error)

        try:
            return self.execute(**kwargs)
        except Exception as e:
            return ToolResult(success=False, error=f"Tool execution failed: {str(e)}")

    def to_dict(self) -> dict[str, Any]:
        """JSON description used by /tools/list."""
        return {
            "name": self.name,
            "description": self.description,
            "parameters": [
                {
                    "name": p.name,
                    "type": p.type.__name__,
                    "description": p.description,
                    "required": p.required,
                    "default": p.default,
                }
                for p in self.parameters
            ],
        }
