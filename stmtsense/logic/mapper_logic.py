from typing import Dict, Optional, Sequence
from stmtsense.models import ColumnSuggestions, MappedField, SuggestionRule, DEFAULT_LOCALE_PACK
from stmtsense.config import get_logger

logger = get_logger(__name__)

_FIELD_TO_ATTR = {
    MappedField.DATE: "date_col",
    MappedField.DESCRIPTION: "desc_col",
    MappedField.DEBIT: "debit_col",
    MappedField.CREDIT: "credit_col",
    MappedField.AMOUNT: "amount_col",
    MappedField.CATEGORY: "category_col",
}

def suggest_columns(headers: Sequence[str], rules: Sequence[SuggestionRule] = DEFAULT_LOCALE_PACK.suggestion_rules) -> ColumnSuggestions:
    """
    Greedy keyword suggestion over an ordered rule list.
    Headers are scanned left to right; each header goes to the first rule
    whose field is still free and whose keywords match. Assigned fields are
    never reassigned.
    """
    assigned: Dict[MappedField, Optional[int]] = {rule.field: None for rule in rules}

    for idx, header in enumerate(headers):
        for rule in rules:
            if assigned[rule.field] is not None:
                continue
            if rule.matches(header):
                assigned[rule.field] = idx
                logger.debug(f"Header {idx} '{header}' -> {rule.field.value}")
                break

    values = {_FIELD_TO_ATTR[field]: idx for field, idx in assigned.items()}
    is_double_entry = values.get("debit_col") is not None and values.get("credit_col") is not None

    suggestions = ColumnSuggestions(**values, is_double_entry=is_double_entry)
    logger.info(f"Column suggestions: {suggestions.to_wire()}")
    return suggestions
