from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from keshig.errors import DuplicateEntryError
from keshig.identifiers import IdentifierFactory, new_identifier, unique_identifier
from keshig.schemas import INDEX_SEPARATOR, CorruptRecord, IndexEntry

logger = logging.getLogger(__name__)

_FIELD_COUNT = 3


class IndexStore:
    """Path -> (fingerprint, identifier) table persisted as one line per entry.

    The file is the source of truth: membership queries reload it first, and
    every mutation rewrites it in full.
    """

    def __init__(
        self,
        index_path: str | Path,
        *,
        identifier_factory: IdentifierFactory = new_identifier,
    ) -> None:
        self.index_path = Path(index_path)
        self.identifier_factory = identifier_factory
        self._entries: list[IndexEntry] = []
        self._corrupt_records: list[CorruptRecord] = []

    @property
    def entries(self) -> list[IndexEntry]:
        return list(self._entries)

    @property
    def corrupt_records(self) -> list[CorruptRecord]:
        return list(self._corrupt_records)

    def load(self) -> list[IndexEntry]:
        if not self.index_path.exists():
            self.index_path.touch()
            logger.info("index created path=%s", self.index_path)

        raw = self.index_path.read_bytes()
        entries: list[IndexEntry] = []
        corrupt: list[CorruptRecord] = []
        seen_paths: set[str] = set()
        seen_identifiers: set[str] = set()

        for line_number, raw_line in enumerate(raw.split(b"\n"), start=1):
            if not raw_line.strip():
                continue
            try:
                line = raw_line.decode("utf-8")
            except UnicodeDecodeError:
                corrupt.append(
                    CorruptRecord(
                        line_number,
                        raw_line.decode("utf-8", errors="replace"),
                        "invalid UTF-8",
                    )
                )
                continue

            parsed = parse_index_line(line, line_number=line_number)
            if isinstance(parsed, CorruptRecord):
                corrupt.append(parsed)
                continue

            if parsed.path in seen_paths:
                corrupt.append(CorruptRecord(line_number, line, "duplicate path"))
                continue
            if parsed.identifier in seen_identifiers:
                corrupt.append(CorruptRecord(line_number, line, "duplicate identifier"))
                continue

            seen_paths.add(parsed.path)
            seen_identifiers.add(parsed.identifier)
            entries.append(parsed)

        for record in corrupt:
            logger.warning(
                "index skipped corrupt record line=%d reason=%s",
                record.line_number,
                record.reason,
            )

        self._entries = entries
        self._corrupt_records = corrupt
        return self.entries

    def contains(self, path: str) -> bool:
        return self.get(path) is not None

    def get(self, path: str) -> IndexEntry | None:
        self.load()
        for entry in self._entries:
            if entry.path == path:
                return entry
        return None

    def append(self, entry: IndexEntry) -> None:
        if any(existing.path == entry.path for existing in self._entries):
            raise DuplicateEntryError(f"path already indexed: {entry.path}")
        self._ensure_identifier_free(entry)

        self._write([*self._entries, entry])
        logger.info("index append path=%s identifier=%s", entry.path, entry.identifier)

    def upsert(self, entry: IndexEntry) -> None:
        for position, existing in enumerate(self._entries):
            if existing.path != entry.path:
                continue
            self._ensure_identifier_free(entry, ignore_path=entry.path)
            updated = list(self._entries)
            updated[position] = entry
            self._write(updated)
            logger.info(
                "index update path=%s identifier=%s previous_identifier=%s",
                entry.path,
                entry.identifier,
                existing.identifier,
            )
            return

        self.append(entry)

    def generate_unique_identifier(self) -> str:
        taken = {entry.identifier for entry in self._entries}
        return unique_identifier(taken, factory=self.identifier_factory)

    def _ensure_identifier_free(self, entry: IndexEntry, ignore_path: str | None = None) -> None:
        for existing in self._entries:
            if existing.path == ignore_path:
                continue
            if existing.identifier == entry.identifier:
                raise DuplicateEntryError(
                    f"identifier already used by {existing.path}: {entry.identifier}"
                )

    def _write(self, entries: list[IndexEntry]) -> None:
        body = "".join(f"{entry.to_line()}\n" for entry in entries)
        tmp_path = self.index_path.with_name(f"{self.index_path.name}.tmp")
        try:
            tmp_path.write_text(body, encoding="utf-8", newline="\n")
            tmp_path.replace(self.index_path)
        finally:
            tmp_path.unlink(missing_ok=True)
        self._entries = entries


def parse_index_line(line: str, *, line_number: int = 0) -> IndexEntry | CorruptRecord:
    fields = line.rstrip("\r").split(INDEX_SEPARATOR)
    if len(fields) != _FIELD_COUNT:
        return CorruptRecord(
            line_number=line_number,
            raw=line,
            reason=f"expected {_FIELD_COUNT} fields, got {len(fields)}",
        )

    path, fingerprint, identifier = fields
    try:
        return IndexEntry(path=path, fingerprint=fingerprint, identifier=identifier)
    except ValidationError as exc:
        reason = "; ".join(error["msg"] for error in exc.errors())
        return CorruptRecord(line_number=line_number, raw=line, reason=reason)
