from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import IO, Any

from ledger_import.excel.reader import FileParseError, ParsedFile, parse_import_file
from ledger_import.logging.error_log import ErrorLogBuffer, ErrorRecord
from ledger_import.models.field_spec import NONE_SENTINEL, AliasRegistry, EntityDefinition, FieldMapping
from ledger_import.models.import_outcome import ImportOutcome, ValidationError
from ledger_import.models.row_data import RowData
from ledger_import.models.wizard_step import WizardStep

from .auto_mapper import MatchStrategy, auto_map
from .executor import InsertOne, execute_import
from .mapping_editor import MappingEditor
from .progress import ProgressTracker
from .transformer import transform_rows
from .validator import validate_rows

"""Import wizard: the step machine driving one import session.

    UPLOAD --upload()--> MAPPING --proceed_to_preview()--> PREVIEW
    PREVIEW --run_import()--> IMPORTING --> COMPLETE
    PREVIEW --back_to_mapping()--> MAPPING
    IMPORTING --(unexpected exception)--> PREVIEW
    any step but IMPORTING --reset()--> UPLOAD

The wizard is the only holder of cross-stage state. Transitions attempted
from the wrong step, or while another stage is still running, are rejected:
they log a warning, return False and change nothing.
"""

__all__ = [
    "ImportWizard",
    "REQUIRED_FIELDS_WARNING",
]

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_WARNING = "Please map all required fields"


class ImportWizard:
    def __init__(
        self,
        entity: str,
        registry: AliasRegistry,
        insert_one: InsertOne,
        *,
        strategy: MatchStrategy | None = None,
        error_log: ErrorLogBuffer | None = None,
        show_progress: bool = False,
    ) -> None:
        self.definition: EntityDefinition = registry[entity]
        self._insert_one = insert_one
        self._strategy = strategy
        self._error_log = error_log
        self._show_progress = show_progress
        self._busy = False
        self._clear()

    def _clear(self) -> None:
        self.step = WizardStep.UPLOAD
        self.parsed: ParsedFile | None = None
        self.editor: MappingEditor | None = None
        self.transformed: list[RowData] = []
        self.valid: list[RowData] = []
        self.errors: list[ValidationError] = []
        self.outcome: ImportOutcome | None = None
        self.error: str | None = None

    # -- read-only views -------------------------------------------------

    @property
    def entity(self) -> str:
        return self.definition.name

    @property
    def filename(self) -> str:
        return self.parsed.filename if self.parsed is not None else ""

    @property
    def headers(self) -> tuple[str, ...]:
        return self.parsed.headers if self.parsed is not None else ()

    @property
    def raw_rows(self) -> tuple[Any, ...]:
        return self.parsed.rows if self.parsed is not None else ()

    @property
    def mappings(self) -> tuple[FieldMapping, ...]:
        return self.editor.mappings if self.editor is not None else ()

    # -- guards ----------------------------------------------------------

    def _accept(self, action: str, *expected: WizardStep) -> bool:
        if self._busy:
            logger.warning("%s rejected: another step is still running", action)
            return False
        if self.step not in expected:
            logger.warning(
                "%s rejected in step=%s (expected %s)",
                action, self.step.value, "/".join(s.value for s in expected),
            )
            return False
        return True

    def _record(self, row: int, error_type: str, message: str) -> None:
        if self._error_log is not None:
            self._error_log.append(
                ErrorRecord.create(
                    file=self.filename,
                    entity=self.entity,
                    row=row,
                    error_type=error_type,
                    message=message,
                )
            )

    # -- transitions -----------------------------------------------------

    async def upload(self, source: str | Path | IO[bytes], filename: str | None = None) -> bool:
        """UPLOAD -> MAPPING: parse the file and propose mappings.

        Ingestion errors leave the wizard in UPLOAD with `error` set.
        """
        if not self._accept("upload", WizardStep.UPLOAD):
            return False
        self.error = None
        self._busy = True
        try:
            parsed = await asyncio.to_thread(parse_import_file, source, filename)
        except FileParseError as e:
            self.error = str(e)
            name = filename or (Path(source).name if isinstance(source, (str, Path)) else "")
            logger.error("upload failed file=%s: %s", name, e)
            if self._error_log is not None:
                self._error_log.append(
                    ErrorRecord.create(
                        file=name, entity=self.entity, row=-1,
                        error_type="FILE_PARSE_ERROR", message=str(e),
                    )
                )
            return False
        finally:
            self._busy = False

        proposed = auto_map(
            parsed.headers,
            self.definition.target_fields,
            self.definition.aliases,
            strategy=self._strategy,
        )
        self.parsed = parsed
        self.editor = MappingEditor(
            self.definition.target_fields,
            source_columns=parsed.headers,
            proposed=proposed,
        )
        self.step = WizardStep.MAPPING
        logger.info(
            "loaded %d rows from %s (%d/%d columns auto-mapped)",
            len(parsed), parsed.filename, len(self.editor.mappings), len(parsed.headers),
        )
        return True

    def _loaded(self) -> tuple[ParsedFile, MappingEditor]:
        if self.parsed is None or self.editor is None:
            raise RuntimeError(f"no file loaded in step={self.step.value}")
        return self.parsed, self.editor

    def set_mapping(self, target_field: str, source_field: str | None) -> bool:
        """Edit one mapping; only allowed while in MAPPING.

        Raises MappingError for an unknown target field or source column.
        """
        if not self._accept("set_mapping", WizardStep.MAPPING):
            return False
        _, editor = self._loaded()
        editor.set_mapping(target_field, source_field)
        return True

    def mapped_source(self, target_field: str) -> str:
        return self.editor.mapped_source(target_field) if self.editor is not None else NONE_SENTINEL

    def missing_required(self) -> list[str]:
        if self.editor is None:
            return list(self.definition.required_fields)
        return self.editor.missing_required()

    def all_required_mapped(self) -> bool:
        return self.editor is not None and self.editor.all_required_mapped()

    def proceed_to_preview(self) -> bool:
        """MAPPING -> PREVIEW: transform and validate every parsed row."""
        if not self._accept("proceed_to_preview", WizardStep.MAPPING):
            return False
        parsed, editor = self._loaded()
        if not editor.all_required_mapped():
            missing = ", ".join(editor.missing_required())
            self.error = REQUIRED_FIELDS_WARNING
            logger.warning("required fields not mapped: %s", missing)
            return False

        self.error = None
        self.transformed = transform_rows(parsed.rows, editor.mappings, self.definition.aliases)
        result = validate_rows(self.transformed, self.definition.required_fields)
        self.valid = result.valid
        self.errors = result.errors
        for err in self.errors:
            self._record(err.row, "VALIDATION_ERROR", err.message)
        self.step = WizardStep.PREVIEW
        logger.info("preview: %d valid, %d with errors (skipped)", len(self.valid), len(self.errors))
        return True

    def back_to_mapping(self) -> bool:
        """PREVIEW -> MAPPING, keeping the current mappings."""
        if not self._accept("back_to_mapping", WizardStep.PREVIEW):
            return False
        self.transformed = []
        self.valid = []
        self.errors = []
        self.error = None
        self.step = WizardStep.MAPPING
        return True

    async def run_import(self) -> bool:
        """PREVIEW -> IMPORTING -> COMPLETE.

        An exception escaping the executor returns the wizard to PREVIEW with
        no outcome stored.
        """
        if not self._accept("run_import", WizardStep.PREVIEW):
            return False
        if not self.valid:
            self.error = "No valid data to import"
            logger.warning("run_import rejected: no valid rows")
            return False

        self.error = None
        self.outcome = None
        self.step = WizardStep.IMPORTING
        self._busy = True
        progress = ProgressTracker(len(self.valid)) if self._show_progress else None
        try:
            outcome = await execute_import(
                self.valid,
                self._insert_one,
                progress=progress,
                error_log=self._error_log,
                entity=self.entity,
                filename=self.filename,
            )
        except Exception as e:
            self.error = f"Import failed: {e}"
            logger.error("import aborted entity=%s: %s", self.entity, e)
            self._record(-1, "IMPORT_ABORTED", str(e))
            self.step = WizardStep.PREVIEW
            return False
        finally:
            self._busy = False
            if progress is not None:
                progress.close()

        self.outcome = outcome
        self.step = WizardStep.COMPLETE
        return True

    def reset(self) -> bool:
        """Back to UPLOAD, discarding everything derived from the file.

        Not available while importing: a started import runs to completion.
        """
        if not self._accept(
            "reset",
            WizardStep.UPLOAD, WizardStep.MAPPING, WizardStep.PREVIEW, WizardStep.COMPLETE,
        ):
            return False
        self._clear()
        return True
