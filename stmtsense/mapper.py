from typing import Optional
from stmtsense.models import ColumnMapping, FileAnalysis, ImportColumnSpec, ImportRequest
from stmtsense.mapping_store import MappingStore
from stmtsense.validator import validate_mapping
from stmtsense.config import get_logger

logger = get_logger(__name__)

def seed_mapping(analysis: FileAnalysis, store: Optional[MappingStore] = None) -> ColumnMapping:
    """
    Builds the initial mapping shown to the user.
    1. A mapping stored for this fingerprint wins.
    2. Otherwise copy the suggestions and the probed dialect, keeping only
       the amount fields that fit the suggested layout.
    """
    if store is not None and analysis.mapping_found:
        stored = store.lookup(analysis.fingerprint)
        if stored is not None:
            logger.info(f"Seeding mapping from stored rule for '{analysis.fingerprint}'.")
            return stored.mapping.model_copy()
        logger.warning("Analysis reported a stored mapping but the store no longer has it.")

    s = analysis.suggestions
    dialect = analysis.probed_dialect
    mapping = ColumnMapping(
        date_col=s.date_col,
        desc_col=s.desc_col,
        category_col=s.category_col,
        is_double_entry=s.is_double_entry,
        is_european_format=dialect.is_european_format,
        date_format=dialect.date_format,
    )
    if s.is_double_entry:
        return mapping.model_copy(update={"debit_col": s.debit_col, "credit_col": s.credit_col})
    return mapping.model_copy(update={"amount_col": s.amount_col})

def _col(idx: Optional[int]) -> str:
    return "" if idx is None else str(idx)

def build_import_request(analysis: FileAnalysis, mapping: ColumnMapping, institution_name: str = "") -> Optional[ImportRequest]:
    """
    Payload for the import service. Returns None for a mapping that does not validate.
    """
    result = validate_mapping(mapping, column_count=len(analysis.headers))
    if not result.is_valid:
        logger.error(f"Refusing to build import request: {result.errors}")
        return None

    return ImportRequest(
        date_format=mapping.date_format.value,
        header_rows=analysis.skip_lines,
        institution_name=institution_name,
        mapping=ImportColumnSpec(
            date_column=_col(mapping.date_col),
            description_column=_col(mapping.desc_col),
            amount_column=_col(mapping.amount_col),
            debit_column=_col(mapping.debit_col),
            credit_column=_col(mapping.credit_col),
            category_column=_col(mapping.category_col),
            is_european_format=mapping.is_european_format,
            delimiter=analysis.delimiter,
            skip_lines=analysis.skip_lines,
        ),
    )
