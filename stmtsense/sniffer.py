from typing import Optional, Union
from stmtsense.models import FileAnalysis, LocalePack, ColumnSuggestions, DEFAULT_LOCALE_PACK
from stmtsense.logic.sniffer_logic import (
    non_blank_lines, detect_delimiter, locate_header_row, split_line, extract_sample_rows
)
from stmtsense.logic.mapper_logic import suggest_columns
from stmtsense.logic.dialect import probe_dialect
from stmtsense.logic.fingerprint import build_fingerprint
from stmtsense.mapping_store import MappingStore
from stmtsense.data.constants import DEFAULT_DELIMITER
from stmtsense.config import get_logger

logger = get_logger(__name__)

def decode_text(data: bytes) -> str:
    """
    Decodes raw file bytes.
    Tries UTF-8 first (dropping a BOM), then falls back to Windows-1252,
    which many Portuguese/European bank exports use.
    """
    try:
        return data.decode('utf-8-sig')
    except UnicodeDecodeError:
        logger.warning("File is not valid UTF-8. Falling back to Windows-1252.")
        return data.decode('cp1252', errors='replace')

def analyze_file(content: Union[str, bytes],
                 store: Optional[MappingStore] = None,
                 locale: LocalePack = DEFAULT_LOCALE_PACK) -> FileAnalysis:
    """
    Infers the structure of a bank export without parsing it.
    Never raises on malformed input: every stage has a fallback and the
    dialect carries a confidence score instead.
    """
    if isinstance(content, bytes):
        content = decode_text(content)

    logger.info("Stage 1: Sniffing for delimiter and header...")
    lines = non_blank_lines(content)

    if not lines:
        logger.warning("No content found. Returning empty analysis.")
        return FileAnalysis(
            delimiter=DEFAULT_DELIMITER,
            fingerprint=build_fingerprint([]),
        )

    delimiter = detect_delimiter(lines[0][1])
    header_pos = locate_header_row(lines, delimiter, locale.header_keywords)
    skip_lines, header_line = lines[header_pos]
    headers = split_line(header_line, delimiter)
    sample_rows = extract_sample_rows(lines, header_pos, delimiter)
    logger.info(f"Final Header Decision: Row {skip_lines}, headers {headers}")

    logger.info("Stage 2: Suggesting column mapping...")
    suggestions: ColumnSuggestions = suggest_columns(headers, locale.suggestion_rules)

    probed_dialect = probe_dialect(sample_rows, suggestions, delimiter)
    fingerprint = build_fingerprint(headers)

    mapping_found = False
    can_auto_import = False
    if store is not None:
        stored = store.lookup(fingerprint)
        if stored is not None:
            logger.info(f"Found stored mapping for fingerprint '{fingerprint}'.")
            mapping_found = True
            can_auto_import = stored.auto_import

    return FileAnalysis(
        headers=headers,
        sample_rows=sample_rows,
        delimiter=delimiter,
        skip_lines=skip_lines,
        fingerprint=fingerprint,
        suggestions=suggestions,
        probed_dialect=probed_dialect,
        mapping_found=mapping_found,
        can_auto_import=can_auto_import,
    )
