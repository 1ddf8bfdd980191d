# Custom exceptions for mfdcore

from typing import Optional, Tuple


class MfdCoreError(Exception):
    """Base exception for all application-specific errors."""
    pass


# Standard parse error codes: code -> (label, description)
PARSE_CODES = {
    "E001": ("syntax", "Generic syntax error"),
    "E002": ("unexpected-token", "Unexpected token encountered"),
    "E003": ("unclosed-brace", "Unclosed brace or block"),
    "E004": ("missing-name", "Missing construct name"),
    "E005": ("missing-type", "Missing type annotation"),
    "E006": ("invalid-decorator", "Malformed decorator syntax"),
    "E007": ("missing-body", "Missing construct body"),
    "E008": ("invalid-transition", "Malformed state transition"),
    "E009": ("invalid-endpoint", "Malformed API endpoint"),
    "E010": ("recovered", "Construct recovered with errors (partial parse)"),
    "E011": ("eof", "Unexpected end of file"),
}


def classify_parse_error(message: str) -> str:
    """Classify a raw parse error message into a standard code using heuristics."""
    msg = message.lower()
    if "end of input" in msg or "unexpected end" in msg:
        return "E011"
    if "unclosed" in msg or 'expected "}"' in msg or 'missing "}"' in msg:
        return "E003"
    if "unexpected" in msg:
        return "E002"
    if "missing name" in msg or "expected identifier" in msg:
        return "E004"
    if "missing type" in msg or "expected type" in msg:
        return "E005"
    if "decorator" in msg or "@" in msg:
        return "E006"
    if "missing body" in msg or 'expected "{"' in msg:
        return "E007"
    if "transition" in msg or "->" in msg:
        return "E008"
    if "endpoint" in msg or "GET " in message or "POST " in message:
        return "E009"
    if "recover" in msg:
        return "E010"
    return "E001"


class ParseError(MfdCoreError):
    """Raised by a Parser when a source file is malformed."""

    def __init__(
        self,
        file_path: str,
        message: str,
        location: Optional[Tuple[int, int]] = None,
    ):
        self.file_path = file_path
        self.message = message
        self.location = location  # (line, column), 1-based
        self.code = classify_parse_error(message)
        where = file_path
        if location:
            where = f"{file_path}:{location[0]}:{location[1]}"
        super().__init__(f"Failed to parse {where}: {message}")

    @property
    def line(self) -> Optional[int]:
        return self.location[0] if self.location else None

    @property
    def column(self) -> Optional[int]:
        return self.location[1] if self.location else None


class ConfigError(MfdCoreError):
    """Raised for configuration-related problems."""
    pass
