from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

INDEX_SEPARATOR = "<--->"
_HEX_DIGEST_RE = re.compile(r"^[0-9a-f]+$")


class DTOBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class PathKind(StrEnum):
    REGULAR = "regular"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    DEVICE = "device"
    MISSING = "missing"


class StatusCode(StrEnum):
    MODIFIED = "modified"
    UNTRACKED = "untracked"
    UNCHANGED = "unchanged"
    OTHER = "other"


class TrackAction(StrEnum):
    RELOCATED = "relocated"
    NONE = "none"


class IndexEntry(DTOBase):
    path: str
    fingerprint: str
    identifier: str

    @field_validator("path")
    @classmethod
    def validate_path(cls, value: str) -> str:
        if not value:
            raise ValueError("path must not be empty")
        if INDEX_SEPARATOR in value:
            raise ValueError(f"path must not contain {INDEX_SEPARATOR!r}")
        if "\n" in value or "\r" in value:
            raise ValueError("path must not contain line breaks")
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise ValueError("path must be valid UTF-8") from exc
        return value

    @field_validator("fingerprint")
    @classmethod
    def validate_fingerprint(cls, value: str) -> str:
        normalized = value.strip().lower()
        if not _HEX_DIGEST_RE.match(normalized):
            raise ValueError("fingerprint must be a hex digest")
        return normalized

    @field_validator("identifier")
    @classmethod
    def validate_identifier(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("identifier must not be empty")
        if INDEX_SEPARATOR in normalized or "/" in normalized or "\\" in normalized:
            raise ValueError("identifier contains reserved characters")
        if normalized in {".", ".."}:
            raise ValueError("identifier must not be a relative path marker")
        return normalized

    def to_line(self) -> str:
        return INDEX_SEPARATOR.join((self.path, self.fingerprint, self.identifier))


@dataclass(slots=True, frozen=True)
class CorruptRecord:
    line_number: int
    raw: str
    reason: str


@dataclass(slots=True, frozen=True)
class StatusReport:
    code: StatusCode
    token: str


@dataclass(slots=True, frozen=True)
class TrackOutcome:
    path: str
    status: StatusReport
    action: TrackAction
    entry: IndexEntry | None = None
