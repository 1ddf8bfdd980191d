"""Data models for include resolution."""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from mfdcore import ast


class ResolveErrorType(str, Enum):
    CIRCULAR_INCLUDE = "CIRCULAR_INCLUDE"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    PARSE_ERROR = "PARSE_ERROR"
    MAX_DEPTH_EXCEEDED = "MAX_DEPTH_EXCEEDED"
    SUSPICIOUS_PATH = "SUSPICIOUS_PATH"


class ErrorLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    column: int


class ResolveError(BaseModel):
    """
    A recoverable problem found while expanding includes.
    """

    model_config = ConfigDict(frozen=True)

    type: ResolveErrorType
    message: str
    file: str = Field(description="File the problem is about (absolute path)")
    included_from: Optional[str] = Field(None, description="File containing the offending include")
    location: Optional[ErrorLocation] = None
    include_chain: Tuple[str, ...] = Field(default=(), description="Basenames from the root file down")

    def format(self) -> str:
        """Compiler-style one-liner: file:line:column: TYPE message"""
        where = self.file
        if self.location:
            where = f"{where}:{self.location.line}:{self.location.column}"
        return f"{where}: {self.type.value} {self.message}"


class ResolveResult(BaseModel):
    """Merged document plus everything learned while building it."""

    document: ast.Document
    files: List[str] = Field(default_factory=list, description="Every file loaded, root first")
    errors: List[ResolveError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_of(self, error_type: ResolveErrorType) -> List[ResolveError]:
        return [e for e in self.errors if e.type == error_type]
