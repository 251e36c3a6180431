"""Live Dashboard session state and tab-scoped persistence.

A session is the single logical writer for one visitor tab: it owns the
active dataset, its column descriptors and the chart working set. Everything
runs synchronously; the only asynchronous boundary is reading an uploaded
file, modelled as `begin_file_read` / `complete_file_read`. Starting any new
dataset load supersedes an in-flight read, whose result is discarded when it
finally arrives (last write wins).

Persistence is opt-in and goes through an injected `SessionStore`. The store
is tab-scoped by contract: implementations must never transmit or persist the
dataset outside the visitor's own session.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Final, Protocol

from .builder import ChartWorkingSet
from .chart_config import ChartConfiguration
from .codec import decode_columns, decode_rows, encode_columns, encode_rows
from .engine import ChartSpecification, evaluate_working_set
from .ingest import ALLOWED_EXTENSIONS, MAX_UPLOAD_BYTES, check_upload, decode_upload, parse_pasted_text
from .options import build_chart_options
from .parser import ParsedDataset, parse_tabular_text
from .profiler import ColumnDescriptor, profile_columns
from .templates import ChartTemplate, bind_template, get_chart_template
from .validator import ChartConfigurationValidationResult, validate_chart_configuration
from .values import Row

logger = logging.getLogger(__name__)

DATA_STORAGE_KEY: Final[str] = "dashboard-data"
COLUMNS_STORAGE_KEY: Final[str] = "dashboard-columns"


@dataclass(frozen=True, slots=True)
class DatasetSnapshot:
    """Rows and column descriptors saved for a session."""

    rows: tuple[Row, ...]
    columns: tuple[ColumnDescriptor, ...]


class SessionStore(Protocol):
    """Tab-scoped storage capability for dataset snapshots."""

    def save(self, snapshot: DatasetSnapshot) -> None: ...

    def load(self) -> DatasetSnapshot | None: ...

    def clear(self) -> None: ...


class InMemorySessionStore:
    """SessionStore keeping JSON strings under the two fixed storage keys.

    Args:
        storage: Optional backing mapping (e.g. a tab-local key/value area).
            A private dict is used when omitted.
    """

    def __init__(self, storage: dict[str, str] | None = None) -> None:
        self._storage: dict[str, str] = {} if storage is None else storage

    def save(self, snapshot: DatasetSnapshot) -> None:
        self._storage[DATA_STORAGE_KEY] = json.dumps(encode_rows(snapshot.rows))
        self._storage[COLUMNS_STORAGE_KEY] = json.dumps(encode_columns(snapshot.columns))

    def load(self) -> DatasetSnapshot | None:
        raw_rows = self._storage.get(DATA_STORAGE_KEY)
        raw_columns = self._storage.get(COLUMNS_STORAGE_KEY)
        if not raw_rows or not raw_columns:
            return None
        return DatasetSnapshot(rows=decode_rows(json.loads(raw_rows)), columns=decode_columns(json.loads(raw_columns)))

    def clear(self) -> None:
        self._storage.pop(DATA_STORAGE_KEY, None)
        self._storage.pop(COLUMNS_STORAGE_KEY, None)


@dataclass(frozen=True, slots=True)
class FileReadToken:
    """Handle for one pending file read; only the latest token is honoured."""

    generation: int
    filename: str


class LiveDashboardSession:
    """State and operations of one Live Dashboard tab.

    Args:
        store: Snapshot store; an InMemorySessionStore when omitted.
        keep_in_session: Initial value of the "keep data in this tab" toggle.
        allowed_extensions: Accepted upload extensions.
        max_upload_bytes: Upload size cap.
    """

    def __init__(
        self,
        *,
        store: SessionStore | None = None,
        keep_in_session: bool = False,
        allowed_extensions: Sequence[str] = ALLOWED_EXTENSIONS,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
    ) -> None:
        self.store: SessionStore = store if store is not None else InMemorySessionStore()
        self.allowed_extensions = tuple(allowed_extensions)
        self.max_upload_bytes = max_upload_bytes
        self.rows: tuple[Row, ...] = ()
        self.columns: tuple[ColumnDescriptor, ...] = ()
        self.charts = ChartWorkingSet()
        self._keep_in_session = False
        self._read_generation = 0
        if keep_in_session:
            self.set_keep_in_session(True)

    @property
    def has_data(self) -> bool:
        return bool(self.rows)

    @property
    def keep_in_session(self) -> bool:
        return self._keep_in_session

    def set_keep_in_session(self, enabled: bool) -> None:
        """Toggle tab-scoped persistence.

        Enabling restores a saved snapshot when one exists, otherwise saves the
        current dataset. Disabling clears the store.
        """

        self._keep_in_session = enabled
        if not enabled:
            self.store.clear()
            return

        snapshot = self.store.load()
        if snapshot is not None:
            self.rows = snapshot.rows
            self.columns = snapshot.columns
            logger.info("Restored session dataset: rows=%d columns=%d", len(self.rows), len(self.columns))
            return
        self._persist()

    def load_text(self, text: str) -> ParsedDataset:
        """Replace the dataset with pasted text.

        Raises:
            ParseError: When the text is blank or yields no rows; the current
                dataset is left untouched.
        """

        parsed = parse_pasted_text(text)
        self._read_generation += 1
        self._replace_dataset(parsed)
        return parsed

    def begin_file_read(self, filename: str, size_bytes: int) -> FileReadToken:
        """Validate a selected file and start a read that supersedes earlier ones.

        Raises:
            FileTooLargeError: When the file exceeds the size cap.
            UnsupportedFormatError: When the extension is not accepted.
        """

        check_upload(
            filename,
            size_bytes,
            allowed_extensions=self.allowed_extensions,
            max_bytes=self.max_upload_bytes,
        )
        self._read_generation += 1
        return FileReadToken(generation=self._read_generation, filename=filename)

    def complete_file_read(self, token: FileReadToken, payload: bytes) -> bool:
        """Apply the bytes of a finished read if it is still the latest one.

        Returns:
            True when the dataset was replaced, False when the read was
            superseded and its result discarded.

        Raises:
            ParseError: When the file content cannot be decoded or parsed.
        """

        if token.generation != self._read_generation:
            logger.debug("Discarding superseded file read %s (generation %d)", token.filename, token.generation)
            return False
        self._replace_dataset(parse_tabular_text(decode_upload(payload)))
        return True

    def load_upload(self, filename: str, payload: bytes) -> bool:
        """Validate and apply an upload whose bytes are already available."""

        token = self.begin_file_read(filename, len(payload))
        return self.complete_file_read(token, payload)

    def apply_template(self, template: ChartTemplate | str) -> list[ChartConfiguration]:
        """Bind a template to the current columns and append its charts.

        Raises:
            ValueError: When a template key does not match the catalog.
        """

        if isinstance(template, str):
            resolved = get_chart_template(template)
            if resolved is None:
                raise ValueError(f"Unknown chart template: {template!r}.")
            template = resolved
        added = self.charts.extend(bind_template(template, self.columns))
        self._persist()
        return added

    def create_chart(self, **kwargs: Any) -> ChartConfiguration:
        chart = self.charts.create(**kwargs)
        self._persist()
        return chart

    def duplicate_chart(self, chart_id: str) -> ChartConfiguration:
        chart = self.charts.duplicate(chart_id)
        self._persist()
        return chart

    def update_chart(self, chart_id: str, **changes: Any) -> ChartConfiguration:
        chart = self.charts.update(chart_id, **changes)
        self._persist()
        return chart

    def remove_chart(self, chart_id: str) -> None:
        self.charts.remove(chart_id)
        self._persist()

    def chart_specs(self) -> list[ChartSpecification]:
        """Evaluate every chart in the working set against the dataset."""

        return evaluate_working_set(self.charts, self.rows)

    def chart_options(self) -> list[dict[str, Any]]:
        """Return renderer options for every chart in the working set."""

        return [build_chart_options(spec) for spec in self.chart_specs()]

    def validate_charts(self) -> dict[str, ChartConfigurationValidationResult]:
        """Validate every chart against the current columns, keyed by chart id."""

        return {chart.id: validate_chart_configuration(chart, self.columns) for chart in self.charts}

    def _replace_dataset(self, parsed: ParsedDataset) -> None:
        self.rows = parsed.rows
        self.columns = profile_columns(parsed.rows)
        logger.info(
            "Loaded dashboard dataset: rows=%d columns=%d skipped=%d",
            len(self.rows),
            len(self.columns),
            parsed.skipped_rows,
        )
        self._persist()

    def _persist(self) -> None:
        """Save the dataset when the visitor opted into tab-scoped persistence."""

        if not self._keep_in_session or not self.rows:
            return
        self.store.save(DatasetSnapshot(rows=self.rows, columns=self.columns))
