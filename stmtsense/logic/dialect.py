import re
from typing import Optional, Sequence, Tuple
from stmtsense.models import ColumnSuggestions, DateFormat, DecimalSeparator, ProbedDialect
from stmtsense.data.constants import (
    AMOUNT_CLEAN_REGEX, DATE_SPLIT_REGEX, MAX_DECIMAL_DIGITS, MAX_MONTH, MAX_DAY,
    EUROPEAN_CURRENCY_MARKERS, US_CURRENCY_MARKER, SEMICOLON_EUROPEAN_BIAS,
    NO_EVIDENCE_CONFIDENCE,
)
from stmtsense.config import get_logger

logger = get_logger(__name__)

def _cell(row: Sequence[str], idx: Optional[int]) -> Optional[str]:
    if idx is None or idx >= len(row):
        return None
    return row[idx]

def _digits_after(s: str, sep: str) -> int:
    return sum(c.isdigit() for c in s[s.rindex(sep) + 1:])

def classify_amount(value: str) -> Optional[DecimalSeparator]:
    """
    Guesses the decimal separator of a single amount.
    Returns None when the value carries no evidence either way,
    e.g. '1,234' could be a thousands separator.
    """
    s = re.sub(AMOUNT_CLEAN_REGEX, '', value)
    has_comma = ',' in s
    has_dot = '.' in s

    if has_comma and has_dot:
        # Whichever comes last is the decimal separator
        return DecimalSeparator.COMMA if s.rindex(',') > s.rindex('.') else DecimalSeparator.DOT
    if has_comma:
        return DecimalSeparator.COMMA if _digits_after(s, ',') <= MAX_DECIMAL_DIGITS else None
    if has_dot:
        return DecimalSeparator.DOT if _digits_after(s, '.') <= MAX_DECIMAL_DIGITS else None
    return None

def classify_currency(cell: str) -> Tuple[int, int]:
    """Returns (european, us) signal increments for one cell."""
    # Markers are case-sensitive: 'Amateur' must not count as EUR
    european = 1 if any(marker in cell for marker in EUROPEAN_CURRENCY_MARKERS) else 0
    # R$ is the Brazilian real, not a dollar
    us = 1 if US_CURRENCY_MARKER in cell.replace('R$', '') else 0
    return european, us

def is_day_first_date(value: str) -> bool:
    """True when the first numeric date token can only be a day, i.e. lies in (12, 31]."""
    for token in re.split(DATE_SPLIT_REGEX, value.strip()):
        token = token.strip()
        if token.isdecimal():
            return MAX_MONTH < int(token) <= MAX_DAY
    return False

def probe_dialect(sample_rows: Sequence[Sequence[str]], suggestions: ColumnSuggestions, delimiter: str) -> ProbedDialect:
    """
    Decides decimal convention and date ordering from the sample rows.

    Signals:
    1. Amount format of the debit column (double entry) or the amount column.
    2. Currency markers in any cell.
    3. A leading date token above 12 forces day-first (sticky).
    4. Semicolon delimiter biases toward European.
    """
    logger.info("Stage 3: Probing dialect...")
    eu_signals = 0
    us_signals = 0
    day_first = False

    amount_idx = suggestions.debit_col if suggestions.is_double_entry else suggestions.amount_col

    for row in sample_rows:
        amount = _cell(row, amount_idx)
        if amount:
            sep = classify_amount(amount)
            if sep == DecimalSeparator.COMMA:
                eu_signals += 1
            elif sep == DecimalSeparator.DOT:
                us_signals += 1

        for cell in row:
            eu, us = classify_currency(cell)
            eu_signals += eu
            us_signals += us

        date_value = _cell(row, suggestions.date_col)
        if date_value and is_day_first_date(date_value):
            day_first = True

    if delimiter == ';':
        eu_signals += SEMICOLON_EUROPEAN_BIAS

    total = eu_signals + us_signals
    is_european = eu_signals > us_signals
    if total:
        confidence = max(eu_signals, us_signals) / total
    else:
        logger.warning("No dialect evidence found. Using defaults.")
        confidence = NO_EVIDENCE_CONFIDENCE

    date_format = DateFormat.DAY_FIRST if (day_first or is_european) else DateFormat.MONTH_FIRST

    logger.info(f"Dialect signals: european={eu_signals}, us={us_signals}, day_first={day_first}. "
                f"European={is_european}, confidence={confidence:.2f}")
    return ProbedDialect(is_european_format=is_european, date_format=date_format, confidence=confidence)
