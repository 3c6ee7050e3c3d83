import json
from stmtsense.mapping_store import MappingStore
from stmtsense.models import ColumnMapping, DateFormat

def _mapping():
    return ColumnMapping(date_col=0, desc_col=1, amount_col=2,
                         is_european_format=True, date_format=DateFormat.DAY_FIRST)

def test_remember_persists_across_instances(tmp_path):
    path = str(tmp_path / "rules.json")
    store = MappingStore(path)
    assert store.remember("date|description|amount", _mapping(), auto_import=True) is True

    reloaded = MappingStore(path)
    stored = reloaded.lookup("date|description|amount")
    assert stored is not None
    assert stored.mapping == _mapping()
    assert stored.auto_import is True

    with open(path, 'r', encoding='utf-8') as f:
        raw = json.load(f)
    assert raw["date|description|amount"]["mapping"]["date_format"] == "DD-MM-YYYY"

def test_lookup_unknown_and_empty(tmp_path):
    store = MappingStore(str(tmp_path / "rules.json"))
    assert store.lookup("unknown") is None
    assert store.lookup("") is None
    assert store.remember("", _mapping()) is False

def test_forget(tmp_path):
    store = MappingStore(str(tmp_path / "rules.json"))
    store.remember("a|b|c", _mapping())
    assert store.forget("a|b|c") is True
    assert store.forget("a|b|c") is False
    assert MappingStore(store.file_path).lookup("a|b|c") is None

def test_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "rules.json"
    path.write_text("{not json")
    store = MappingStore(str(path))
    assert store.rules == {}

def test_unwritable_path_does_not_raise(tmp_path):
    store = MappingStore(str(tmp_path / "missing_dir" / "rules.json"))
    assert store.remember("a|b", _mapping()) is False

def test_default_path_comes_from_workspace(tmp_path, monkeypatch):
    from stmtsense.workspace import Workspace

    monkeypatch.setenv("STMTSENSE_HOME", str(tmp_path / "home"))
    monkeypatch.setattr(Workspace, "_instance", None)

    store = MappingStore()
    assert store.file_path == str(tmp_path / "home" / "configs" / "mapping_rules.json")
    assert store.remember("a|b", _mapping()) is True
