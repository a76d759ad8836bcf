"""Media loading tool (images, PDFs, videos)."""

import logging
import mimetypes
from pathlib import Path

from fsai.tools.base import ToolContext, ToolExecutionError
from fsai.tools.builtin.file import FileSystemTool
from fsai.tools.models import MediaPayload, ProcessFileParams, ToolKind, ToolParameter

logger = logging.getLogger(__name__)

IMAGE_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
DOCUMENT_MIME_TYPES = frozenset({"application/pdf"})
VIDEO_MIME_TYPES = frozenset(
    {
        "video/x-flv",
        "video/quicktime",
        "video/mpeg",
        "video/mp4",
        "video/webm",
        "video/wmv",
        "video/x-ms-wmv",
        "video/3gpp",
    }
)

MAX_IMAGE_PDF_BYTES = 7 * 1024 * 1024
MAX_VIDEO_BYTES = 45 * 1024 * 1024

# Extensions missing from older mimetypes tables
_EXTRA_TYPES = {
    ".webp": "image/webp",
    ".flv": "video/x-flv",
    ".wmv": "video/wmv",
    ".3gp": "video/3gpp",
}


def guess_mime_type(path: str | Path) -> str:
    """Guess a MIME type from the file extension."""
    suffix = Path(path).suffix.lower()
    if suffix in _EXTRA_TYPES:
        return _EXTRA_TYPES[suffix]
    mime_type, _ = mimetypes.guess_type(str(path))
    return mime_type or "application/octet-stream"


class ProcessFileTool(FileSystemTool):
    """Load an image, PDF or video so the model can inspect it.

    Only offered when multimedia support is enabled. The file is returned
    base64-encoded and forwarded to the model as an inline attachment.
    """

    requires_multimedia = True

    @property
    def kind(self) -> ToolKind:
        return ToolKind.PROCESS_MEDIA

    @property
    def description(self) -> str:
        return (
            "Loads an image, PDF, or video file so you can analyze its contents. "
            "Use this when the user wants you to watch a video, read a document, "
            "or look at an image. After the tool runs, the file's content will be "
            "available to you. This tool does not work for audio files."
        )

    @property
    def parameters(self) -> list[ToolParameter]:
        return [
            ToolParameter(
                name="path",
                type="string",
                description="The full path to the file to process.",
            ),
        ]

    def run(self, params: ProcessFileParams, context: ToolContext) -> MediaPayload:
        file_path = context.resolve(params.path)

        if not file_path.exists():
            raise ToolExecutionError(f"File does not exist: {file_path}", path=str(file_path))
        if not file_path.is_file():
            raise ToolExecutionError(f"Path is not a file: {file_path}", path=str(file_path))

        mime_type = guess_mime_type(file_path)
        is_video = mime_type in VIDEO_MIME_TYPES

        if mime_type not in IMAGE_MIME_TYPES | DOCUMENT_MIME_TYPES and not is_video:
            raise ToolExecutionError(
                f"Unsupported file type: {mime_type}. This tool supports images "
                "(PNG, JPEG, WEBP), PDFs, and videos.",
                path=str(file_path),
            )

        size = file_path.stat().st_size
        size_mb = size / 1024 / 1024
        if is_video and size > MAX_VIDEO_BYTES:
            raise ToolExecutionError(
                f"File size ({size_mb:.2f} MB) exceeds the 45 MB limit for videos.",
                path=str(file_path),
            )
        if not is_video and size > MAX_IMAGE_PDF_BYTES:
            raise ToolExecutionError(
                f"File size ({size_mb:.2f} MB) exceeds the 7 MB limit for images and PDFs.",
                path=str(file_path),
            )

        logger.info(f"Loading {mime_type} file ({size} bytes): {file_path}")
        return MediaPayload.from_bytes(str(file_path), mime_type, file_path.read_bytes())
