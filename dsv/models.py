from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .dialects import Dialect
from .rules import ESCAPE_CHAR, QUOTE_CHAR, UNIX_COMMENT_PREFIX

logger = logging.getLogger("dsv.models")

Table = List[List[str]]

# Marks an argument the caller did not pass, so None can mean "disabled".
DEFAULT = object()


def _check_delimiter(value: str) -> str:
    if len(value) != 1:
        raise ValueError(f"delimiter must be a single character, got {value!r}")
    if value in "\r\n":
        raise ValueError("delimiter cannot be a line break character")
    return value


def _dialect_of(data: Dict[str, Any]) -> Dialect:
    return Dialect(data.get("dialect") or Dialect.UNIX)


def _fill_comment_prefix(data: Dict[str, Any], dialect: Dialect) -> None:
    if not dialect.conventions.supports_comments:
        if data.get("comment_prefix"):
            logger.warning("%s has no comment lines; comment prefix ignored", dialect.value)
        data["comment_prefix"] = None
    elif data.get("comment_prefix", DEFAULT) is DEFAULT:
        data["comment_prefix"] = UNIX_COMMENT_PREFIX


def _check_reserved(dialect: Dialect, delimiter: str, comment_prefix: Optional[str]) -> None:
    if dialect is Dialect.UNIX and delimiter == ESCAPE_CHAR:
        raise ValueError("the escape character cannot be the delimiter")
    if dialect is Dialect.RFC4180 and delimiter == QUOTE_CHAR:
        raise ValueError("the quote character cannot be the delimiter")
    if comment_prefix:
        if delimiter == comment_prefix[0]:
            raise ValueError("delimiter cannot be the comment prefix character")
        if comment_prefix[0] == ESCAPE_CHAR:
            raise ValueError("comment prefix cannot start with the escape character")


# --- configuration ------------------------------------------------------------

class ParserConfig(BaseModel):
    """
    Everything a parse needs, fixed before the first read.

    Unset delimiter and known_delimiters take the dialect's defaults. The
    comment prefix defaults to "#" for the Unix dialect; RFC 4180 has no
    comments, so any prefix given with it is dropped.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    stream: Any
    dialect: Dialect = Dialect.UNIX
    delimiter: str
    known_delimiters: Tuple[str, ...]
    comment_prefix: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        dialect = _dialect_of(data)
        conventions = dialect.conventions
        data["dialect"] = dialect
        if data.get("delimiter") is None:
            data["delimiter"] = conventions.default_delimiter
        if data.get("known_delimiters") is None:
            data["known_delimiters"] = conventions.known_delimiters
        _fill_comment_prefix(data, dialect)
        return data

    @field_validator("delimiter")
    @classmethod
    def _single_char(cls, value: str) -> str:
        return _check_delimiter(value)

    @field_validator("known_delimiters")
    @classmethod
    def _known_single_chars(cls, value: Tuple[str, ...]) -> Tuple[str, ...]:
        for delimiter in value:
            _check_delimiter(delimiter)
        return value

    @field_validator("comment_prefix")
    @classmethod
    def _empty_prefix_disables(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode="after")
    def _no_conflicts(self) -> "ParserConfig":
        _check_reserved(self.dialect, self.delimiter, self.comment_prefix)
        return self


class BuilderConfig(BaseModel):
    """
    Build settings. The comment prefix follows the parser's defaults; the Unix
    builder uses it to keep records from being written as comment lines.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    table: Table
    stream: Any
    dialect: Dialect = Dialect.UNIX
    delimiter: str
    line_break: str
    comment_prefix: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_defaults(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        dialect = _dialect_of(data)
        data["dialect"] = dialect
        if data.get("delimiter") is None:
            data["delimiter"] = dialect.conventions.default_delimiter
        if data.get("line_break") is None:
            data["line_break"] = dialect.conventions.default_line_break
        _fill_comment_prefix(data, dialect)
        return data

    @field_validator("delimiter")
    @classmethod
    def _single_char(cls, value: str) -> str:
        return _check_delimiter(value)

    @field_validator("comment_prefix")
    @classmethod
    def _empty_prefix_disables(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode="after")
    def _no_conflicts(self) -> "BuilderConfig":
        _check_reserved(self.dialect, self.delimiter, self.comment_prefix)
        return self


# --- HTTP models --------------------------------------------------------------

class ParseResponse(BaseModel):
    dialect: Dialect
    delimiter: str
    records: int
    table: Table


class BuildRequest(BaseModel):
    table: Table
    dialect: Dialect = Dialect.UNIX
    delimiter: Optional[str] = None
    line_break: Optional[str] = None


class BuildResponse(BaseModel):
    content: str


class GuessRequest(BaseModel):
    text: str
    dialect: Dialect = Dialect.UNIX
    known_delimiters: Optional[List[str]] = Field(default=None, examples=[[",", ":"]])


class GuessResponse(BaseModel):
    delimiter: Optional[str] = None
    indeterminate: bool = False


class ConvertedDsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8")
    content_b64: str


class ConversionReport(BaseModel):
    records: int = 0
    max_fields: int = 0
    source: Dict[str, Any] = Field(default_factory=dict)
    target: Dict[str, Any] = Field(default_factory=dict)
    encoding: Dict[str, Any] = Field(default_factory=dict)


class ConvertResponse(BaseModel):
    converted: ConvertedDsv
    report: ConversionReport


class HealthResponse(BaseModel):
    ok: bool = True
