from stmtsense.validator import validate_mapping
from stmtsense.models import ColumnMapping

def test_missing_description_is_invalid():
    """No desc_col means invalid, whatever else is set."""
    for mapping in [
        ColumnMapping(date_col=0, amount_col=2),
        ColumnMapping(date_col=0, debit_col=2, credit_col=3, is_double_entry=True),
        ColumnMapping(date_col=0, amount_col=2, category_col=3),
    ]:
        result = validate_mapping(mapping)
        assert result.is_valid is False
        assert "desc_col must point to a column" in result.errors

def test_double_entry_without_credit_is_invalid():
    mapping = ColumnMapping(date_col=0, desc_col=1, debit_col=2, is_double_entry=True)
    result = validate_mapping(mapping)
    assert result.is_valid is False
    assert any("credit_col" in e for e in result.errors)

def test_single_entry_with_amount_is_valid():
    mapping = ColumnMapping(date_col=0, desc_col=1, amount_col=2)
    result = validate_mapping(mapping)
    assert result.is_valid is True
    assert result.errors == []

def test_double_entry_complete_is_valid():
    mapping = ColumnMapping(date_col=0, desc_col=1, debit_col=2, credit_col=3, is_double_entry=True)
    assert validate_mapping(mapping, column_count=4).is_valid is True

def test_date_and_description_must_differ():
    mapping = ColumnMapping(date_col=1, desc_col=1, amount_col=2)
    result = validate_mapping(mapping)
    assert result.is_valid is False
    assert "date_col and desc_col must differ" in result.errors

def test_indices_bounded_by_column_count():
    mapping = ColumnMapping(date_col=0, desc_col=1, amount_col=5)
    assert validate_mapping(mapping).is_valid is True
    assert validate_mapping(mapping, column_count=3).is_valid is False

def test_leftover_layout_fields_are_invalid():
    """Amount fields must match the layout exactly."""
    both = ColumnMapping(date_col=0, desc_col=1, amount_col=2, debit_col=3, credit_col=4)
    assert validate_mapping(both).is_valid is False
    assert validate_mapping(both.model_copy(update={"is_double_entry": True})).is_valid is False

def test_toggle_clears_and_revalidates():
    mapping = ColumnMapping(date_col=0, desc_col=1, amount_col=2)
    assert validate_mapping(mapping).is_valid is True

    toggled = mapping.with_double_entry(True)
    assert toggled.amount_col is None
    assert validate_mapping(toggled).is_valid is False

    completed = toggled.model_copy(update={"debit_col": 2, "credit_col": 3})
    assert validate_mapping(completed).is_valid is True

    back = completed.with_double_entry(False)
    assert back.debit_col is None and back.credit_col is None
    assert validate_mapping(back).is_valid is False

def test_category_out_of_range():
    mapping = ColumnMapping(date_col=0, desc_col=1, amount_col=2, category_col=9)
    assert validate_mapping(mapping, column_count=4).is_valid is False

def test_not_found_marker_is_accepted_as_unset():
    """-1 coming back from the review payload means 'no column'."""
    mapping = ColumnMapping(date_col=0, desc_col=-1, amount_col=2, category_col=-1)
    assert mapping.desc_col is None
    assert mapping.category_col is None

    result = validate_mapping(mapping)
    assert result.is_valid is False
    assert "desc_col must point to a column" in result.errors
