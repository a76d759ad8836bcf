"""Base classes for tool implementation."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError
from pydantic.alias_generators import to_camel

from fsai.security.guard import AccessGuard
from fsai.tools.models import (
    PARAMS_BY_KIND,
    RiskLevel,
    ToolKind,
    ToolParameter,
    ToolParams,
)
from fsai.tools.risk import classify


class ToolExecutionError(Exception):
    """Raised when a tool cannot complete.

    The message is reported back to the model as the tool's error.
    """

    def __init__(self, message: str, path: str | None = None):
        """Initialize error.

        Args:
            message: Error message
            path: Resolved path the failure concerns, if any
        """
        super().__init__(message)
        self.path = path


class ToolValidationError(ToolExecutionError):
    """Raised when required parameters are missing or malformed."""


class AccessDeniedError(ToolExecutionError):
    """Raised when a path fails the access guard."""


@dataclass
class ToolContext:
    """Per-call execution context.

    Carries the directory the user is looking at and the settings snapshot
    the access decision is made with.
    """

    guard: AccessGuard
    current_path: str | None = None
    allow_root_access: bool = False

    def resolve(self, raw_path: str) -> Path:
        """Resolve a tool path against the current directory."""
        return self.guard.resolve(raw_path, self.current_path)


class Tool(ABC):
    """Base class for all tools.

    Each tool handles exactly one ToolKind and defines:
    - Description and parameters (for the model to understand when to use it)
    - Execution logic returning a typed result payload
    - Risk tier (derived from the kind)
    """

    # Tool is only offered to the model when multimedia support is enabled
    requires_multimedia: bool = False

    def __init__(self):
        """Initialize the tool."""
        self._validate_definition()

    @property
    @abstractmethod
    def kind(self) -> ToolKind:
        """Tool kind handled by this tool."""
        pass

    @property
    def name(self) -> str:
        """Tool name as exposed to the model."""
        return self.kind.value

    @property
    @abstractmethod
    def description(self) -> str:
        """Description of what the tool does (for the model)."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> list[ToolParameter]:
        """List of tool parameters, using wire names."""
        pass

    @property
    def params_model(self) -> type[ToolParams]:
        """Pydantic model validating this tool's arguments."""
        return PARAMS_BY_KIND[self.kind]

    @property
    def risk(self) -> RiskLevel:
        """Risk tier of this tool."""
        return classify(self.kind)

    @property
    def is_dangerous(self) -> bool:
        """Whether the tool can destroy or overwrite data."""
        return self.risk == RiskLevel.HIGH

    def get_input_schema(self) -> dict[str, Any]:
        """Get JSON schema for tool input.

        Returns:
            JSON schema describing tool parameters
        """
        properties = {}
        required = []

        for param in self.parameters:
            properties[param.name] = {
                "type": param.type,
                "description": param.description,
            }
            if param.required:
                required.append(param.name)

        return {
            "type": "object",
            "properties": properties,
            "required": required,
        }

    def get_tool_definition(self) -> dict[str, Any]:
        """Get complete tool definition for the model.

        Returns:
            Tool definition in OpenAI function-calling format
        """
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.get_input_schema(),
            },
        }

    def validate_input(self, arguments: dict[str, Any]) -> ToolParams:
        """Validate raw arguments into this tool's parameter model.

        Args:
            arguments: Arguments as proposed by the model

        Returns:
            Validated parameters

        Raises:
            ToolValidationError: If a required parameter is missing or invalid
        """
        try:
            return self.params_model.model_validate(arguments)
        except ValidationError as e:
            raise ToolValidationError(self.required_message()) from e

    def required_message(self) -> str:
        """Error text listing the required parameters."""
        names = [p.name for p in self.parameters if p.required]
        if len(names) == 1:
            return f"{names[0]} parameter is required for {self.name}"
        return f"{' and '.join(names)} parameters are required for {self.name}"

    @abstractmethod
    async def execute(self, params: Any, context: ToolContext) -> BaseModel:
        """Execute the tool with validated parameters.

        Paths in ``params`` have already passed the access guard.

        Args:
            params: Validated parameters (instance of ``params_model``)
            context: Execution context

        Returns:
            Result payload

        Raises:
            ToolExecutionError: If the operation cannot complete
        """
        pass

    def _validate_definition(self) -> None:
        """Validate tool definition is correct.

        Raises:
            ValueError: If tool definition is invalid
        """
        if not self.description:
            raise ValueError("Tool description cannot be empty")

        # Declared parameters must match the validating model's wire names
        declared = {p.name for p in self.parameters}
        expected = {to_camel(name) for name in self.params_model.model_fields}
        if declared != expected:
            raise ValueError(
                f"Parameters of {self.name} do not match its parameter model: "
                f"{sorted(declared)} != {sorted(expected)}"
            )

    def __str__(self) -> str:
        """String representation."""
        return f"Tool({self.name})"

    def __repr__(self) -> str:
        """Representation."""
        return f"<Tool name={self.name} risk={self.risk.value}>"
