"""File and directory operation tools."""

import asyncio
import logging
import os
import shutil
from abc import abstractmethod
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from fsai.tools.base import AccessDeniedError, Tool, ToolContext, ToolExecutionError
from fsai.tools.models import (
    CopyFileParams,
    CreateDirectoryParams,
    DeleteItemParams,
    DirectoryListingPayload,
    DirectoryTreePayload,
    FileContentPayload,
    FileEntry,
    GetTreeParams,
    MessagePayload,
    MoveItemParams,
    ReadDirectoryParams,
    ReadFileParams,
    RenameFileParams,
    ToolKind,
    ToolParameter,
    WriteFileParams,
)

logger = logging.getLogger(__name__)

TREE_BRANCH = "├── "
TREE_LAST = "└── "
TREE_PIPE = "│   "
TREE_SPACE = "    "
TREE_ERROR_MARKER = "[error reading directory]"


# =============================================================================
# Filesystem helpers
# =============================================================================


def _sort_key(is_dir: bool, name: str) -> tuple[int, str, str]:
    # Directories first, then case-insensitive by name
    return (0 if is_dir else 1, name.casefold(), name)


def list_directory(path: str | Path) -> list[FileEntry]:
    """List a directory, directories first and then alphabetically.

    Entries that cannot be inspected are skipped with a warning.

    Args:
        path: Absolute directory path

    Returns:
        Sorted directory entries

    Raises:
        OSError: If the directory itself cannot be read
    """
    entries: list[FileEntry] = []

    with os.scandir(path) as it:
        for entry in it:
            try:
                stat = entry.stat()
                entries.append(
                    FileEntry(
                        name=entry.name,
                        path=entry.path,
                        is_directory=entry.is_dir(),
                        is_file=entry.is_file(),
                        size=stat.st_size if entry.is_file() else 0,
                    )
                )
            except OSError as e:
                logger.warning(f"Could not read entry {entry.path}: {e}")

    entries.sort(key=lambda e: _sort_key(e.is_directory, e.name))
    return entries


def generate_tree(path: str | Path, prefix: str = "") -> str:
    """Render a directory tree with box-drawing connectors.

    Symlinked directories are listed but not descended into. A subdirectory
    that cannot be read is rendered with an inline error marker instead of
    aborting the traversal.

    Raises:
        OSError: If ``path`` itself cannot be read
    """
    with os.scandir(path) as it:
        entries = sorted(
            it, key=lambda e: _sort_key(e.is_dir(follow_symlinks=False), e.name)
        )

    lines: list[str] = []
    for i, entry in enumerate(entries):
        is_last = i == len(entries) - 1
        lines.append(f"{prefix}{TREE_LAST if is_last else TREE_BRANCH}{entry.name}\n")

        if entry.is_dir(follow_symlinks=False):
            child_prefix = prefix + (TREE_SPACE if is_last else TREE_PIPE)
            try:
                lines.append(generate_tree(entry.path, child_prefix))
            except OSError as e:
                logger.debug(f"Cannot read {entry.path}: {e}")
                lines.append(f"{child_prefix}{TREE_LAST}{TREE_ERROR_MARKER}\n")

    return "".join(lines)


def ensure_allowed(context: ToolContext, path: Path) -> None:
    """Guard a path derived from parameters (e.g. parent + new name)."""
    if not context.guard.is_allowed(path, context.allow_root_access):
        raise AccessDeniedError(f"Access to path '{path}' is disallowed.", path=str(path))


# =============================================================================
# Tools
# =============================================================================


class FileSystemTool(Tool):
    """Tool whose blocking filesystem work runs in a worker thread."""

    async def execute(self, params: Any, context: ToolContext) -> BaseModel:
        return await asyncio.to_thread(self.run, params, context)

    @abstractmethod
    def run(self, params: Any, context: ToolContext) -> BaseModel:
        """Perform the operation synchronously."""
        pass


class ReadFileTool(FileSystemTool):
    """Read a UTF-8 text file."""

    @property
    def kind(self) -> ToolKind:
        return ToolKind.READ_FILE

    @property
    def description(self) -> str:
        return (
            "Reads the content of a file at the specified path. "
            "Use this when the user wants to view, open, or examine file contents."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path to the file to read",
            ),
        ]

    def run(self, params: ReadFileParams, context: ToolContext) -> FileContentPayload:
        file_path = context.resolve(params.path)
        logger.info(f"Reading file: {file_path}")

        if not file_path.exists():
            raise ToolExecutionError(f"File does not exist: {file_path}", path=str(file_path))
        if not file_path.is_file():
            raise ToolExecutionError(f"Path is not a file: {file_path}", path=str(file_path))

        try:
            content = file_path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ToolExecutionError(
                f"File is not UTF-8 text: {file_path}", path=str(file_path)
            ) from e

        return FileContentPayload(path=str(file_path), content=content)


class WriteFileTool(FileSystemTool):
    """Create or overwrite a text file.

    Parent directories are created as needed.
    """

    @property
    def kind(self) -> ToolKind:
        return ToolKind.WRITE_FILE

    @property
    def description(self) -> str:
        return (
            "Writes or creates a text file with the specified content at the given path. "
            "An existing file is overwritten; a missing file is created. "
            "Use for text-based files like .txt, .md, .json, etc."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path to the file to write.",
            ),
            ToolParameter(
                name="content",
                type="string",
                description="The content to write to the file.",
            ),
        ]

    def run(self, params: WriteFileParams, context: ToolContext) -> MessagePayload:
        file_path = context.resolve(params.path)
        logger.info(f"Writing file: {file_path}")

        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(params.content, encoding="utf-8")

        return MessagePayload(
            message=f"File written successfully to {file_path}",
            path=str(file_path),
        )


class ReadDirectoryTool(FileSystemTool):
    """List the entries of a directory."""

    @property
    def kind(self) -> ToolKind:
        return ToolKind.READ_DIRECTORY

    @property
    def description(self) -> str:
        return (
            "Lists the files and folders in a specified directory. "
            "Use this to explore the file system."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path of the directory to list.",
            ),
        ]

    def run(
        self, params: ReadDirectoryParams, context: ToolContext
    ) -> DirectoryListingPayload:
        dir_path = context.resolve(params.path)
        logger.info(f"Listing directory: {dir_path}")

        if not dir_path.exists():
            raise ToolExecutionError(f"Directory does not exist: {dir_path}", path=str(dir_path))
        if not dir_path.is_dir():
            raise ToolExecutionError(f"Path is not a directory: {dir_path}", path=str(dir_path))

        return DirectoryListingPayload(path=str(dir_path), entries=list_directory(dir_path))


class GetTreeTool(FileSystemTool):
    """Render the nested structure of a directory."""

    @property
    def kind(self) -> ToolKind:
        return ToolKind.GET_TREE

    @property
    def description(self) -> str:
        return (
            "Gets the directory tree structure for a given path, showing nested "
            "files and folders. Use this to visualize the layout of a directory."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path of the directory to get the tree for.",
            ),
        ]

    def run(self, params: GetTreeParams, context: ToolContext) -> DirectoryTreePayload:
        dir_path = context.resolve(params.path)
        logger.info(f"Generating tree: {dir_path}")

        if not dir_path.exists():
            raise ToolExecutionError(f"Directory does not exist: {dir_path}", path=str(dir_path))
        if not dir_path.is_dir():
            raise ToolExecutionError(f"Path is not a directory: {dir_path}", path=str(dir_path))

        return DirectoryTreePayload(path=str(dir_path), tree=generate_tree(dir_path))


class CreateDirectoryTool(FileSystemTool):
    """Create a named directory inside a parent directory."""

    @property
    def kind(self) -> ToolKind:
        return ToolKind.CREATE_DIRECTORY

    @property
    def description(self) -> str:
        return "Creates a new directory inside a specified path."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The path of the parent directory where the new directory will be created.",
            ),
            ToolParameter(
                name="name",
                type="string",
                description="The name of the new directory to create.",
            ),
        ]

    def run(self, params: CreateDirectoryParams, context: ToolContext) -> MessagePayload:
        target = Path(os.path.abspath(context.resolve(params.path) / params.name))
        ensure_allowed(context, target)
        logger.info(f"Creating directory: {target}")

        if target.exists():
            raise ToolExecutionError(f"Directory already exists: {target}", path=str(target))

        target.mkdir(parents=True)
        return MessagePayload(
            message=f"Directory '{params.name}' created at '{params.path}'",
            path=str(target),
        )


class RenameFileTool(FileSystemTool):
    """Rename a file or directory in place."""

    @property
    def kind(self) -> ToolKind:
        return ToolKind.RENAME

    @property
    def description(self) -> str:
        return "Renames a file or directory at the specified path."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path to the file or folder to rename.",
            ),
            ToolParameter(
                name="newName",
                type="string",
                description="The new name for the file or folder.",
            ),
        ]

    def run(self, params: RenameFileParams, context: ToolContext) -> MessagePayload:
        source = context.resolve(params.path)

        if not source.exists() and not source.is_symlink():
            raise ToolExecutionError(
                f"File or directory does not exist: {source}", path=str(source)
            )

        target = Path(os.path.abspath(source.parent / params.new_name))
        ensure_allowed(context, target)

        if target.exists():
            raise ToolExecutionError(
                f"A file or directory with the name '{params.new_name}' already exists",
                path=str(target),
            )

        logger.info(f"Renaming {source} to {target}")
        source.rename(target)
        return MessagePayload(
            message=f"Renamed '{source.name}' to '{params.new_name}'",
            path=str(target),
        )


class DeleteItemTool(FileSystemTool):
    """Delete a file, or a directory and everything below it."""

    @property
    def kind(self) -> ToolKind:
        return ToolKind.DELETE

    @property
    def description(self) -> str:
        return "Deletes a file or directory at the specified path."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path to the file or directory to delete.",
            ),
        ]

    def run(self, params: DeleteItemParams, context: ToolContext) -> MessagePayload:
        target = context.resolve(params.path)

        if not target.exists() and not target.is_symlink():
            raise ToolExecutionError(
                f"File or directory does not exist: {target}", path=str(target)
            )

        logger.info(f"Deleting: {target}")
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
            message = f"Directory '{target.name}' deleted successfully"
        else:
            target.unlink()
            message = f"File '{target.name}' deleted successfully"

        return MessagePayload(message=message, path=str(target))


class CopyFileTool(FileSystemTool):
    """Copy a single file.

    An existing destination directory receives the file under its own name.
    """

    @property
    def kind(self) -> ToolKind:
        return ToolKind.COPY

    @property
    def description(self) -> str:
        return "Copies a file from a source path to a destination path."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path to the file to copy.",
            ),
            ToolParameter(
                name="destinationPath",
                type="string",
                description="The destination path where the file should be copied.",
            ),
        ]

    def run(self, params: CopyFileParams, context: ToolContext) -> MessagePayload:
        source = context.resolve(params.path)
        destination = context.resolve(params.destination_path)

        if not source.exists():
            raise ToolExecutionError(f"Source file does not exist: {source}", path=str(source))
        if not source.is_file():
            raise ToolExecutionError(
                f"Source path is not a file: {source}. Only files can be copied with this tool.",
                path=str(source),
            )

        if destination.is_dir():
            destination = destination / source.name

        logger.info(f"Copying {source} to {destination}")
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)

        return MessagePayload(
            message=f"File copied from '{source}' to '{destination}'",
            path=str(destination),
        )


class MoveItemTool(FileSystemTool):
    """Move a file or directory.

    An existing destination directory receives the item under its own name.
    """

    @property
    def kind(self) -> ToolKind:
        return ToolKind.MOVE

    @property
    def description(self) -> str:
        return "Moves a file or directory from a source path to a destination path."

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="sourcePath",
                type="string",
                description="The source path of the file or directory to move.",
            ),
            ToolParameter(
                name="destinationPath",
                type="string",
                description=(
                    "The destination path where the item should be moved. "
                    "If this is a directory, the source item will be moved inside it."
                ),
            ),
        ]

    def run(self, params: MoveItemParams, context: ToolContext) -> MessagePayload:
        source = context.resolve(params.source_path)
        destination = context.resolve(params.destination_path)

        if not source.exists() and not source.is_symlink():
            raise ToolExecutionError(f"Source path does not exist: {source}", path=str(source))

        if destination.is_dir():
            destination = destination / source.name

        logger.info(f"Moving {source} to {destination}")
        shutil.move(str(source), str(destination))

        return MessagePayload(
            message=f"Moved '{source}' to '{destination}'",
            path=str(destination),
        )
