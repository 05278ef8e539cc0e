from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from pathlib import Path

from ..models.duplicate import ExistingDriver
from ..models.import_result import ImportContext, ImportResult
from ..models.mapping import ColumnMapping
from ..tabular.reader import ParsedFile, parse_csv_text, read_csv_file, read_csv_file_async
from .grid import ReconciliationGrid
from .importer import DriverStore, run_import

"""Import session: the wizard controller owning all per-upload state.

A session reads the reference drivers once (on the first load) and keeps
them for its lifetime; out-of-band writes to the store during the session
are not seen. reset() discards everything, nothing persists until
run_import() commits.
"""

__all__ = [
    "SessionError",
    "ImportSession",
]

logger = logging.getLogger(__name__)


class SessionError(Exception):
    pass


class ImportSession:
    def __init__(self, store: DriverStore, context: ImportContext, *, trust_edits: bool = False) -> None:
        self.store = store
        self.context = context
        self.trust_edits = trust_edits
        self._existing: list[ExistingDriver] | None = None
        self._grid: ReconciliationGrid | None = None

    @property
    def existing(self) -> list[ExistingDriver]:
        # セッション中1回だけ取得
        if self._existing is None:
            self._existing = list(self.store.list_existing(self.context.organization_id, include_deleted=True))
            logger.debug("reference drivers loaded count=%d", len(self._existing))
        return self._existing

    @property
    def grid(self) -> ReconciliationGrid:
        if self._grid is None:
            raise SessionError("no file loaded")
        return self._grid

    @property
    def loaded(self) -> bool:
        return self._grid is not None

    def load_parsed(
        self, parsed: ParsedFile, mappings: Sequence[ColumnMapping] | None = None
    ) -> ReconciliationGrid:
        self._grid = ReconciliationGrid(parsed, self.existing, mappings, trust_edits=self.trust_edits)
        return self._grid

    def load_text(self, text: str, file_name: str | None = None) -> ReconciliationGrid:
        return self.load_parsed(parse_csv_text(text, file_name=file_name))

    def load_file(self, path: Path) -> ReconciliationGrid:
        return self.load_parsed(read_csv_file(path))

    async def load_file_async(self, path: Path) -> ReconciliationGrid:
        return self.load_parsed(await read_csv_file_async(path))

    def run_import(
        self, *, on_complete: Callable[[ImportResult], None] | None = None, progress: bool = True
    ) -> ImportResult:
        """Commit the grid's ready rows (see services.importer.run_import)."""
        ready = self.grid.ready_records()
        logger.info("importing ready rows=%d of %d", len(ready), len(self.grid))
        return run_import(ready, self.store, self.context, on_complete=on_complete, progress=progress)

    def reset(self) -> None:
        """Discard the upload, mappings, findings and the reference snapshot."""
        self._grid = None
        self._existing = None
