from enum import Enum
from typing import Optional, List, Dict, Any, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
import pandas as pd

from stmtsense.data.constants import (
    NOT_FOUND_SENTINEL,
    HEADER_KEYWORDS,
    KEYWORDS_DATE, KEYWORDS_DESC, KEYWORDS_DEBIT,
    KEYWORDS_CREDIT, KEYWORDS_AMOUNT, KEYWORDS_CATEGORY,
)

# --- Dialect Models ---
class DecimalSeparator(str, Enum):
    DOT = "."
    COMMA = ","

class DateFormat(str, Enum):
    DAY_FIRST = "DD-MM-YYYY"
    MONTH_FIRST = "MM-DD-YYYY"

class ProbedDialect(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_european_format: bool = Field(False, description="Comma decimal separator convention.")
    date_format: DateFormat = Field(DateFormat.MONTH_FIRST, description="Day or month first.")
    confidence: float = Field(0.5, ge=0.0, le=1.0, description="Agreement of observed signals.")

    def to_wire(self) -> Dict[str, Any]:
        return {
            "isEuropeanFormat": self.is_european_format,
            "dateFormat": self.date_format.value,
            "confidence": self.confidence,
        }

# --- Column Suggestion Models ---
class MappedField(str, Enum):
    """Semantic fields a column can be suggested for."""
    DATE = "date"
    DESCRIPTION = "description"
    DEBIT = "debit"
    CREDIT = "credit"
    AMOUNT = "amount"
    CATEGORY = "category"

class SuggestionRule(BaseModel):
    """One (predicate, field) entry of the ordered suggestion list."""
    model_config = ConfigDict(frozen=True)

    field: MappedField
    keywords: Tuple[str, ...] = Field(..., description="Lower-case substrings that claim a header.")

    def matches(self, header: str) -> bool:
        h = header.lower()
        return any(kw in h for kw in self.keywords)

class LocalePack(BaseModel):
    """Swappable header vocabularies."""
    model_config = ConfigDict(frozen=True)

    name: str = "default"
    header_keywords: Tuple[str, ...] = Field(..., description="Keywords that mark a header row.")
    suggestion_rules: Tuple[SuggestionRule, ...] = Field(..., description="Ordered by priority.")

DEFAULT_LOCALE_PACK = LocalePack(
    name="pt-es-en",
    header_keywords=tuple(HEADER_KEYWORDS),
    suggestion_rules=(
        SuggestionRule(field=MappedField.DATE, keywords=tuple(KEYWORDS_DATE)),
        SuggestionRule(field=MappedField.DESCRIPTION, keywords=tuple(KEYWORDS_DESC)),
        SuggestionRule(field=MappedField.DEBIT, keywords=tuple(KEYWORDS_DEBIT)),
        SuggestionRule(field=MappedField.CREDIT, keywords=tuple(KEYWORDS_CREDIT)),
        SuggestionRule(field=MappedField.AMOUNT, keywords=tuple(KEYWORDS_AMOUNT)),
        SuggestionRule(field=MappedField.CATEGORY, keywords=tuple(KEYWORDS_CATEGORY)),
    ),
)

def _wire_index(idx: Optional[int]) -> int:
    return NOT_FOUND_SENTINEL if idx is None else idx

class ColumnSuggestions(BaseModel):
    model_config = ConfigDict(frozen=True)

    date_col: Optional[int] = Field(None, ge=0)
    desc_col: Optional[int] = Field(None, ge=0)
    amount_col: Optional[int] = Field(None, ge=0)
    debit_col: Optional[int] = Field(None, ge=0)
    credit_col: Optional[int] = Field(None, ge=0)
    category_col: Optional[int] = Field(None, ge=0)
    is_double_entry: bool = False

    def to_wire(self) -> Dict[str, Any]:
        """camelCase payload with -1 for columns that were not found."""
        return {
            "dateCol": _wire_index(self.date_col),
            "descCol": _wire_index(self.desc_col),
            "amountCol": _wire_index(self.amount_col),
            "debitCol": _wire_index(self.debit_col),
            "creditCol": _wire_index(self.credit_col),
            "categoryCol": _wire_index(self.category_col),
            "isDoubleEntry": self.is_double_entry,
        }

# --- Analysis Result ---
class FileAnalysis(BaseModel):
    model_config = ConfigDict(frozen=True)

    headers: Tuple[str, ...] = Field(default_factory=tuple, description="Order defines column indices.")
    sample_rows: Tuple[Tuple[str, ...], ...] = Field(default_factory=tuple, description="Rows right after the header.")
    delimiter: str = Field(",", min_length=1, max_length=1)
    skip_lines: int = Field(0, ge=0, description="Index of the header row in the original lines.")
    fingerprint: str = ""
    suggestions: ColumnSuggestions = Field(default_factory=ColumnSuggestions)
    probed_dialect: ProbedDialect = Field(default_factory=ProbedDialect)
    mapping_found: bool = False
    can_auto_import: bool = False

    def sample_frame(self) -> pd.DataFrame:
        """Sample rows as a DataFrame under the headers, padded to the header width."""
        width = len(self.headers)
        rows = [(list(row) + [""] * width)[:width] for row in self.sample_rows]
        return pd.DataFrame(rows, columns=list(self.headers))

    def to_wire(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "sampleRows": [list(r) for r in self.sample_rows],
            "delimiter": self.delimiter,
            "skipLines": self.skip_lines,
            "fingerprint": self.fingerprint,
            "suggestions": self.suggestions.to_wire(),
            "probedDialect": self.probed_dialect.to_wire(),
            "mappingFound": self.mapping_found,
            "canAutoImport": self.can_auto_import,
        }

# --- User-confirmed Mapping ---
class ColumnMapping(BaseModel):
    date_col: Optional[int] = Field(None, ge=0, description="Column index for date.")
    desc_col: Optional[int] = Field(None, ge=0, description="Column index for description.")
    amount_col: Optional[int] = Field(None, ge=0, description="Single signed amount column.")
    debit_col: Optional[int] = Field(None, ge=0, description="Money leaving the account.")
    credit_col: Optional[int] = Field(None, ge=0, description="Money entering the account.")
    category_col: Optional[int] = Field(None, ge=0)
    is_double_entry: bool = False
    is_european_format: bool = False
    date_format: DateFormat = DateFormat.MONTH_FIRST

    @field_validator('date_col', 'desc_col', 'amount_col', 'debit_col', 'credit_col', 'category_col', mode='before')
    @classmethod
    def sentinel_to_none(cls, v):
        # The review surface sends -1 back for "no column"
        if v == NOT_FOUND_SENTINEL:
            return None
        return v

    def with_double_entry(self, is_double_entry: bool) -> "ColumnMapping":
        """Copy with the layout toggled; fields of the other layout are cleared."""
        if is_double_entry:
            return self.model_copy(update={"is_double_entry": True, "amount_col": None})
        return self.model_copy(update={"is_double_entry": False, "debit_col": None, "credit_col": None})

class ValidationResult(BaseModel):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)

class StoredMapping(BaseModel):
    """A mapping the user confirmed for a header fingerprint."""
    mapping: ColumnMapping
    auto_import: bool = Field(False, description="Import silently next time this shape is seen.")

# --- Import Service Payload ---
class ImportColumnSpec(BaseModel):
    """Column indices as strings; empty string means unused."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date_column: str
    description_column: str
    amount_column: str = ""
    debit_column: str = ""
    credit_column: str = ""
    category_column: str = ""
    is_european_format: bool
    delimiter: str
    skip_lines: int

class ImportRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date_format: str
    header_rows: int
    institution_name: str = ""
    mapping: ImportColumnSpec
