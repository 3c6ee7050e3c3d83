from typing import Optional
from stmtsense.models import ColumnMapping, ValidationResult
from stmtsense.config import get_logger

logger = get_logger(__name__)

def _is_column(idx: Optional[int], column_count: Optional[int]) -> bool:
    if idx is None:
        return False
    return column_count is None or idx < column_count

def validate_mapping(mapping: ColumnMapping, column_count: Optional[int] = None) -> ValidationResult:
    """
    Checks a (possibly user-edited) mapping before import is allowed.
    Re-run after every edit, including double-entry toggles.
    `column_count` bounds the indices when the header width is known.
    """
    errors = []

    if not _is_column(mapping.date_col, column_count):
        errors.append("date_col must point to a column")
    if not _is_column(mapping.desc_col, column_count):
        errors.append("desc_col must point to a column")
    if mapping.date_col is not None and mapping.date_col == mapping.desc_col:
        errors.append("date_col and desc_col must differ")

    if mapping.is_double_entry:
        if not _is_column(mapping.debit_col, column_count):
            errors.append("debit_col must point to a column in double-entry mode")
        if not _is_column(mapping.credit_col, column_count):
            errors.append("credit_col must point to a column in double-entry mode")
        if mapping.amount_col is not None:
            errors.append("amount_col must be unset in double-entry mode")
    else:
        if not _is_column(mapping.amount_col, column_count):
            errors.append("amount_col must point to a column in single-amount mode")
        if mapping.debit_col is not None or mapping.credit_col is not None:
            errors.append("debit_col and credit_col must be unset in single-amount mode")

    if mapping.category_col is not None and not _is_column(mapping.category_col, column_count):
        errors.append("category_col is out of range")

    if errors:
        logger.warning(f"Mapping invalid: {errors}")
    return ValidationResult(is_valid=not errors, errors=errors)
