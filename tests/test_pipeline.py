import pytest
from stmtsense.pipeline import ImportFlow, FlowState, FlowStateError
from stmtsense.mapping_store import MappingStore
from stmtsense.models import DateFormat

US_EXPORT = (
    "Date,Description,Amount\n"
    "01/15/2024,Coffee,3.50\n"
    "01/16/2024,Books,12.99\n"
)

AMBIGUOUS_EXPORT = (
    "Date,Description,Amount\n"
    "2024-01-15,Coffee,3\n"
)

EUROPEAN_DOUBLE_ENTRY = (
    "Date;Description;Debit;Credit\n"
    "15/01/2024;Rent;1.200,00;\n"
    "16/01/2024;Salary;;3.000,00\n"
)

@pytest.fixture
def store(tmp_path):
    return MappingStore(str(tmp_path / "mapping_rules.json"))

def test_confident_file_goes_straight_to_review():
    flow = ImportFlow()
    assert flow.state == FlowState.UPLOADED

    flow.analyze(US_EXPORT)
    assert flow.state == FlowState.ANALYZED

    assert flow.begin_review() == FlowState.MAPPING_REVIEW
    assert flow.validate() == FlowState.VALID

    request = flow.submit(institution_name="Test Bank")
    payload = request.model_dump(by_alias=True)
    assert payload["dateFormat"] == "MM-DD-YYYY"
    assert payload["mapping"]["amountColumn"] == "2"
    assert payload["mapping"]["debitColumn"] == ""
    assert payload["mapping"]["isEuropeanFormat"] is False

def test_low_confidence_requires_dialect_confirmation():
    flow = ImportFlow()
    analysis = flow.analyze(AMBIGUOUS_EXPORT)
    assert analysis.probed_dialect.confidence == 0.5
    assert flow.needs_dialect_confirmation is True

    assert flow.begin_review() == FlowState.USER_CONFIRM_DIALECT

    assert flow.confirm_dialect(True, DateFormat.DAY_FIRST) == FlowState.MAPPING_REVIEW
    assert flow.mapping.is_european_format is True
    assert flow.mapping.date_format == DateFormat.DAY_FIRST

def test_invalid_mapping_can_be_fixed_by_edit():
    flow = ImportFlow()
    flow.analyze("Date,Description,Notes\n01/15/2024,Coffee,$3.50\n")
    flow.begin_review()

    assert flow.validate() == FlowState.INVALID
    assert any("amount_col" in e for e in flow.validation.errors)

    assert flow.edit(amount_col=2) == FlowState.VALID

def test_toggle_double_entry_revalidates():
    flow = ImportFlow()
    flow.analyze(EUROPEAN_DOUBLE_ENTRY)
    assert flow.begin_review() == FlowState.MAPPING_REVIEW
    assert flow.validate() == FlowState.VALID
    assert flow.mapping.is_european_format is True

    assert flow.toggle_double_entry(False) == FlowState.INVALID
    assert flow.mapping.debit_col is None

    assert flow.edit(amount_col=2) == FlowState.VALID

def test_illegal_transitions_raise():
    flow = ImportFlow()
    with pytest.raises(FlowStateError):
        flow.begin_review()
    with pytest.raises(FlowStateError):
        flow.submit()

    flow.analyze(US_EXPORT)
    with pytest.raises(FlowStateError):
        flow.analyze(US_EXPORT)
    with pytest.raises(FlowStateError):
        flow.confirm_dialect(True)
    # No mapping has been seeded yet
    with pytest.raises(FlowStateError):
        flow.validate()
    with pytest.raises(FlowStateError):
        flow.edit(amount_col=2)

def test_reset_returns_to_uploaded():
    flow = ImportFlow()
    flow.analyze(US_EXPORT)
    flow.reset()
    assert flow.state == FlowState.UPLOADED
    assert flow.analysis is None

def test_remembered_shape_auto_imports(store):
    first = ImportFlow(store=store)
    first.analyze(EUROPEAN_DOUBLE_ENTRY)
    first.begin_review()
    first.validate()
    first.submit(remember=True, auto_import=True)

    second = ImportFlow(store=MappingStore(store.file_path))
    analysis = second.analyze(EUROPEAN_DOUBLE_ENTRY)
    assert analysis.mapping_found is True
    assert analysis.can_auto_import is True

    # Review is skipped entirely
    assert second.begin_review() == FlowState.VALID
    assert second.mapping == first.mapping

def test_remembered_without_auto_import_still_reviews(store):
    first = ImportFlow(store=store)
    first.analyze(US_EXPORT)
    first.begin_review()
    first.validate()
    first.edit(category_col=None, date_format=DateFormat.DAY_FIRST)
    first.submit(remember=True)

    second = ImportFlow(store=store)
    analysis = second.analyze(US_EXPORT)
    assert analysis.mapping_found is True
    assert analysis.can_auto_import is False

    assert second.begin_review() == FlowState.MAPPING_REVIEW
    # The stored override wins over the fresh probe
    assert second.mapping.date_format == DateFormat.DAY_FIRST

def test_clearing_a_column_with_not_found_marker():
    flow = ImportFlow()
    flow.analyze(US_EXPORT)
    flow.begin_review()

    assert flow.edit(desc_col=-1) == FlowState.INVALID
    assert flow.mapping.desc_col is None
    assert flow.edit(desc_col=1) == FlowState.VALID
