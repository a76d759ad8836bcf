"""Data models for the tool system."""

import base64
from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ToolKind(str, Enum):
    """Closed set of operations the model may propose.

    Values are the function names exposed to the model.
    """

    READ_FILE = "read_file"
    WRITE_FILE = "write_file"
    READ_DIRECTORY = "read_directory"
    GET_TREE = "get_tree"
    CREATE_DIRECTORY = "create_directory"
    RENAME = "rename_file"
    DELETE = "delete_item"
    COPY = "copy_file"
    MOVE = "move_item"
    PROCESS_MEDIA = "process_file"
    NAVIGATE = "navigate_user"

    @classmethod
    def parse(cls, name: str) -> Optional["ToolKind"]:
        """Look up a kind by wire name, None if unknown."""
        try:
            return cls(name)
        except ValueError:
            return None


class RiskLevel(str, Enum):
    """Risk tier deciding whether a proposal may ever be auto-confirmed."""

    LOW = "low"
    HIGH = "high"


class ToolStatus(str, Enum):
    """Outcome of resolving one tool call."""

    SUCCESS = "success"
    ERROR = "error"
    DENIED = "denied"


class ToolParameter(BaseModel):
    """Defines a parameter for a tool (used to build the model-facing schema)."""

    name: str
    type: str  # "string", "integer", "boolean", "array", "object"
    description: str
    required: bool = True


# =============================================================================
# Parameters: one model per tool kind
# =============================================================================


class ToolParams(BaseModel):
    """Base for per-kind parameter sets.

    Accepts the camelCase names the model uses (``destinationPath``) as well
    as the Python field names.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    # Fields holding paths that must pass the access guard
    path_fields: ClassVar[tuple[str, ...]] = ()

    def paths(self) -> list[str]:
        """Path-bearing parameter values, in declaration order."""
        return [getattr(self, name) for name in self.path_fields]


class _SinglePathParams(ToolParams):
    path_fields: ClassVar[tuple[str, ...]] = ("path",)

    path: str = Field(min_length=1)


class ReadFileParams(_SinglePathParams):
    pass


class ReadDirectoryParams(_SinglePathParams):
    pass


class GetTreeParams(_SinglePathParams):
    pass


class DeleteItemParams(_SinglePathParams):
    pass


class NavigateParams(_SinglePathParams):
    pass


class ProcessFileParams(_SinglePathParams):
    pass


class WriteFileParams(_SinglePathParams):
    content: str


class CreateDirectoryParams(_SinglePathParams):
    name: str = Field(min_length=1)


class RenameFileParams(_SinglePathParams):
    new_name: str = Field(min_length=1)


class CopyFileParams(ToolParams):
    path_fields: ClassVar[tuple[str, ...]] = ("path", "destination_path")

    path: str = Field(min_length=1)
    destination_path: str = Field(min_length=1)


class MoveItemParams(ToolParams):
    path_fields: ClassVar[tuple[str, ...]] = ("source_path", "destination_path")

    source_path: str = Field(min_length=1)
    destination_path: str = Field(min_length=1)


PARAMS_BY_KIND: dict[ToolKind, type[ToolParams]] = {
    ToolKind.READ_FILE: ReadFileParams,
    ToolKind.WRITE_FILE: WriteFileParams,
    ToolKind.READ_DIRECTORY: ReadDirectoryParams,
    ToolKind.GET_TREE: GetTreeParams,
    ToolKind.CREATE_DIRECTORY: CreateDirectoryParams,
    ToolKind.RENAME: RenameFileParams,
    ToolKind.DELETE: DeleteItemParams,
    ToolKind.COPY: CopyFileParams,
    ToolKind.MOVE: MoveItemParams,
    ToolKind.PROCESS_MEDIA: ProcessFileParams,
    ToolKind.NAVIGATE: NavigateParams,
}


# =============================================================================
# Tool calls
# =============================================================================


class ToolCall(BaseModel):
    """A risk-classified proposal from the model. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str  # Unique within a turn
    name: str  # Function name as proposed by the model
    arguments: dict[str, Any] = Field(default_factory=dict)
    description: str
    risk: RiskLevel

    @property
    def kind(self) -> ToolKind | None:
        """The tool kind, or None when the model named an unknown tool."""
        return ToolKind.parse(self.name)

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name}({', '.join(f'{k}={v}' for k, v in self.arguments.items())})"


# =============================================================================
# Result payloads: one model per result shape
# =============================================================================


class FileEntry(BaseModel):
    """A single directory entry."""

    name: str
    path: str
    is_directory: bool
    is_file: bool
    size: int = 0


class FileContentPayload(BaseModel):
    type: Literal["file_content"] = "file_content"
    path: str
    content: str


class DirectoryListingPayload(BaseModel):
    type: Literal["directory_listing"] = "directory_listing"
    path: str
    entries: list[FileEntry]


class DirectoryTreePayload(BaseModel):
    type: Literal["directory_tree"] = "directory_tree"
    path: str
    tree: str


class NavigationPayload(BaseModel):
    type: Literal["navigation"] = "navigation"
    path: str


class MediaPayload(BaseModel):
    """An image, PDF or video loaded for the model to inspect."""

    type: Literal["media"] = "media"
    path: str
    mime_type: str
    size: int
    data: str  # base64

    @classmethod
    def from_bytes(cls, path: str, mime_type: str, raw: bytes) -> "MediaPayload":
        return cls(
            path=path,
            mime_type=mime_type,
            size=len(raw),
            data=base64.b64encode(raw).decode("ascii"),
        )

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


class MessagePayload(BaseModel):
    """Outcome of a mutation (write, move, rename, ...)."""

    type: Literal["message"] = "message"
    message: str
    path: str | None = None


ResultPayload = Annotated[
    Union[
        FileContentPayload,
        DirectoryListingPayload,
        DirectoryTreePayload,
        NavigationPayload,
        MediaPayload,
        MessagePayload,
    ],
    Field(discriminator="type"),
]


class ToolResult(BaseModel):
    """The recorded outcome of one tool call."""

    tool_call_id: str  # Links to ToolCall.id
    status: ToolStatus
    payload: Optional[ResultPayload] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, tool_call_id: str, payload: Any) -> "ToolResult":
        return cls(tool_call_id=tool_call_id, status=ToolStatus.SUCCESS, payload=payload)

    @classmethod
    def failure(cls, tool_call_id: str, error: str) -> "ToolResult":
        return cls(tool_call_id=tool_call_id, status=ToolStatus.ERROR, error=error)

    @classmethod
    def denied(cls, tool_call_id: str) -> "ToolResult":
        return cls(
            tool_call_id=tool_call_id,
            status=ToolStatus.DENIED,
            error="Denied by user",
        )

    @property
    def is_error(self) -> bool:
        """Whether execution failed (denials are not errors)."""
        return self.status == ToolStatus.ERROR

    def __str__(self) -> str:
        """String representation."""
        if self.status == ToolStatus.DENIED:
            return "Denied by user"
        if self.is_error:
            return f"Error: {self.error}"
        return f"OK ({self.payload.type})" if self.payload else "OK"
