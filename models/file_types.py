"""File type helpers: syntax-highlighting language, text decoding, sizes."""

from typing import Optional

# Extension (lowercase, without dot) -> highlighter language id
LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "html": "html",
    "xml": "xml",
    "css": "css",
    "scss": "scss",
    "sass": "scss",
    "less": "less",
    "json": "json",
    "md": "markdown",
    "py": "python",
    "java": "java",
    "c": "c",
    "cpp": "cpp",
    "cs": "csharp",
    "go": "go",
    "rb": "ruby",
    "php": "php",
    "sh": "bash",
    "bash": "bash",
    "sql": "sql",
    "yaml": "yaml",
    "yml": "yaml",
    "ini": "ini",
    "toml": "toml",
    "rs": "rust",
    "swift": "swift",
    "kt": "kotlin",
    "dart": "dart",
    "lua": "lua",
    "r": "r",
    "perl": "perl",
    "pl": "perl",
    "scala": "scala",
    "groovy": "groovy",
    "dockerfile": "dockerfile",
    "txt": "plaintext",
    "text": "plaintext",
    "log": "plaintext",
}

# Non "text/*" MIME types whose payload is still text
_TEXTUAL_MIME_TYPES = {
    "application/json",
    "application/javascript",
    "application/xml",
    "application/x-sh",
    "application/toml",
    "application/x-yaml",
}

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]


def get_language(file_name: str) -> Optional[str]:
    """Return the highlighter language for a file name, or None if unknown.

    A bare ``Dockerfile`` maps to ``dockerfile``.
    """
    if "." not in file_name:
        return LANGUAGE_BY_EXTENSION.get(file_name.lower())
    extension = file_name.rsplit(".", 1)[-1].lower()
    return LANGUAGE_BY_EXTENSION.get(extension)


def is_textual_mime_type(mime_type: Optional[str]) -> bool:
    if mime_type is None:
        return True
    mime_type = mime_type.split(";", 1)[0].strip().lower()
    return mime_type.startswith("text/") or mime_type in _TEXTUAL_MIME_TYPES


def decode_text_content(
    content: str | bytes | None, mime_type: Optional[str] = None
) -> Optional[str]:
    """Return content as text, or None when it is not representable as text.

    Strings pass through verbatim. Bytes are decoded as UTF-8 when the MIME
    type is textual (or unknown); undecodable or binary payloads yield None.

    Args:
        content: Raw upload payload.
        mime_type: Declared MIME type of the upload, if known.

    Returns:
        Text content, or None for binary/unrepresentable data.
    """
    if content is None or isinstance(content, str):
        return content
    if not is_textual_mime_type(mime_type):
        return None
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return None


def text_size(content: str) -> int:
    """Byte length of text content encoded as UTF-8."""
    return len(content.encode("utf-8"))


def format_bytes(size: int, decimals: int = 2) -> str:
    """Format a byte count for display (e.g. ``1.5 KB``)."""
    if size <= 0:
        return "0 Bytes"
    decimals = max(decimals, 0)
    index = 0
    while size >= 1024 ** (index + 1) and index < len(_SIZE_UNITS) - 1:
        index += 1
    value = round(size / (1024 ** index), decimals)
    if value == int(value):
        value = int(value)
    return f"{value} {_SIZE_UNITS[index]}"
