from enum import Enum
from typing import Optional, Union, Any
from stmtsense.models import (
    ColumnMapping, DateFormat, FileAnalysis, ImportRequest, LocalePack, ValidationResult,
    DEFAULT_LOCALE_PACK,
)
from stmtsense.sniffer import analyze_file
from stmtsense.mapper import seed_mapping, build_import_request
from stmtsense.validator import validate_mapping
from stmtsense.mapping_store import MappingStore
from stmtsense.data.constants import LOW_CONFIDENCE_THRESHOLD
from stmtsense.config import get_logger

logger = get_logger(__name__)

class FlowState(str, Enum):
    UPLOADED = "uploaded"
    ANALYZED = "analyzed"
    USER_CONFIRM_DIALECT = "user_confirm_dialect"
    MAPPING_REVIEW = "mapping_review"
    VALID = "valid"
    INVALID = "invalid"

class FlowStateError(RuntimeError):
    """Raised when an action is not allowed in the current state."""

_EDITABLE = (FlowState.MAPPING_REVIEW, FlowState.VALID, FlowState.INVALID)

class ImportFlow:
    """
    Drives one file from upload to a validated mapping:
    Uploaded -> Analyzed -> (low confidence: UserConfirmDialect ->) MappingReview -> Valid/Invalid
    """

    def __init__(self, store: Optional[MappingStore] = None, locale: LocalePack = DEFAULT_LOCALE_PACK):
        self.store = store
        self.locale = locale
        self.reset()

    def reset(self):
        self.state = FlowState.UPLOADED
        self.analysis: Optional[FileAnalysis] = None
        self.mapping: Optional[ColumnMapping] = None
        self.validation: Optional[ValidationResult] = None

    def _require(self, *states: FlowState):
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise FlowStateError(f"Action needs state in [{allowed}], flow is '{self.state.value}'.")

    @property
    def needs_dialect_confirmation(self) -> bool:
        return self.analysis is not None and self.analysis.probed_dialect.confidence < LOW_CONFIDENCE_THRESHOLD

    def analyze(self, content: Union[str, bytes]) -> FileAnalysis:
        self._require(FlowState.UPLOADED)
        self.analysis = analyze_file(content, store=self.store, locale=self.locale)
        self.state = FlowState.ANALYZED
        return self.analysis

    def begin_review(self) -> FlowState:
        """Seeds the mapping and picks the next step."""
        self._require(FlowState.ANALYZED)
        self.mapping = seed_mapping(self.analysis, self.store)

        if self.analysis.can_auto_import:
            logger.info("Known file shape with auto-import enabled. Skipping review.")
            return self._validate()

        if self.needs_dialect_confirmation:
            logger.info(f"Dialect confidence {self.analysis.probed_dialect.confidence:.2f} "
                        f"below {LOW_CONFIDENCE_THRESHOLD}. Asking user to confirm.")
            self.state = FlowState.USER_CONFIRM_DIALECT
        else:
            self.state = FlowState.MAPPING_REVIEW
        return self.state

    def confirm_dialect(self, is_european_format: bool, date_format: Optional[DateFormat] = None) -> FlowState:
        self._require(FlowState.USER_CONFIRM_DIALECT)
        update = {"is_european_format": is_european_format}
        if date_format is not None:
            update["date_format"] = DateFormat(date_format)
        self.mapping = self.mapping.model_copy(update=update)
        self.state = FlowState.MAPPING_REVIEW
        return self.state

    def validate(self) -> FlowState:
        self._require(*_EDITABLE)
        return self._validate()

    def _validate(self) -> FlowState:
        self.validation = validate_mapping(self.mapping, column_count=len(self.analysis.headers))
        self.state = FlowState.VALID if self.validation.is_valid else FlowState.INVALID
        return self.state

    def edit(self, **changes: Any) -> FlowState:
        """Applies user overrides to the mapping and re-validates."""
        self._require(*_EDITABLE)
        self.mapping = ColumnMapping(**{**self.mapping.model_dump(), **changes})
        return self.validate()

    def toggle_double_entry(self, is_double_entry: bool) -> FlowState:
        self._require(*_EDITABLE)
        self.mapping = self.mapping.with_double_entry(is_double_entry)
        return self.validate()

    def submit(self, institution_name: str = "", remember: bool = False, auto_import: bool = False) -> ImportRequest:
        """Builds the import payload; optionally stores the mapping for this file shape."""
        self._require(FlowState.VALID)
        request = build_import_request(self.analysis, self.mapping, institution_name)
        if remember and self.store is not None:
            self.store.remember(self.analysis.fingerprint, self.mapping, auto_import=auto_import)
        return request
