from typing import List, Optional, Sequence, Tuple
from stmtsense.data.constants import (
    DELIMITER_CANDIDATES, DEFAULT_DELIMITER, SNIFF_WINDOW_SIZE, SAMPLE_ROW_COUNT
)
from stmtsense.config import get_logger

logger = get_logger(__name__)

# (index in the original line list, line text)
IndexedLine = Tuple[int, str]

def non_blank_lines(content: str) -> List[IndexedLine]:
    """
    Pairs every non-blank line with its position in the original line list.
    Lines end at '\\n' only (a trailing '\\r' is dropped), matching how the import
    service counts skipped lines; form feeds or U+2028 inside a cell do not split.
    """
    lines = [line[:-1] if line.endswith('\r') else line for line in content.split('\n')]
    return [(idx, line) for idx, line in enumerate(lines) if line.strip()]

def split_line(line: str, delimiter: str) -> List[str]:
    return [cell.strip() for cell in line.split(delimiter)]

def column_count(line: str, delimiter: str) -> int:
    return line.count(delimiter) + 1

def detect_delimiter(first_line: str) -> str:
    """
    Picks the candidate occurring most often in the first non-blank line.
    Ties go to the earlier candidate; no occurrences at all means comma.
    """
    best = DEFAULT_DELIMITER
    best_count = 0
    for candidate in DELIMITER_CANDIDATES:
        count = first_line.count(candidate)
        if count > best_count:
            best = candidate
            best_count = count
    logger.debug(f"Delimiter {best!r} with {best_count} occurrences.")
    return best

def calculate_keyword_score(line: str, keywords: Sequence[str]) -> int:
    """Number of header keywords found in the line."""
    line_lower = line.lower()
    return sum(1 for kw in keywords if kw in line_lower)

def locate_header_row(lines: Sequence[IndexedLine], delimiter: str, keywords: Sequence[str]) -> Optional[int]:
    """
    Returns the position (within `lines`) of the header row, or None if there are no lines.

    Algorithm:
    1. Scan at most SNIFF_WINDOW_SIZE lines.
    2. Among lines containing a header keyword, take the widest one.
       Banners often mention 'date' but have far fewer columns than the real header.
    3. Without any keyword line, take the widest line in the window.
    """
    window = lines[:SNIFF_WINDOW_SIZE]
    if not window:
        return None

    best_keyword_pos = None
    best_keyword_width = -1
    best_any_pos = 0
    best_any_width = -1

    for pos, (idx, line) in enumerate(window):
        width = column_count(line, delimiter)
        score = calculate_keyword_score(line, keywords)
        logger.debug(f"Row {idx}: {width} columns, keyword score {score}, Content: {line[:50]}...")

        if width > best_any_width:
            best_any_pos, best_any_width = pos, width
        if score > 0 and width > best_keyword_width:
            best_keyword_pos, best_keyword_width = pos, width

    if best_keyword_pos is not None:
        logger.info(f"Keyword header found at line {window[best_keyword_pos][0]} ({best_keyword_width} columns).")
        return best_keyword_pos

    logger.warning("No header keywords found. Falling back to the widest line.")
    return best_any_pos

def extract_sample_rows(lines: Sequence[IndexedLine], header_pos: int, delimiter: str) -> List[List[str]]:
    """The next SAMPLE_ROW_COUNT non-blank lines after the header, split and trimmed."""
    following = lines[header_pos + 1: header_pos + 1 + SAMPLE_ROW_COUNT]
    return [split_line(line, delimiter) for _, line in following]
