import json
import os
from typing import Dict, Optional
from stmtsense.models import ColumnMapping, StoredMapping
from stmtsense.workspace import Workspace
from stmtsense.config import get_logger

logger = get_logger(__name__)

class MappingStore:
    """
    Remembers confirmed column mappings per header fingerprint.
    Backed by a JSON file; a missing or unreadable file means an empty store.
    """

    def __init__(self, file_path: Optional[str] = None):
        self.file_path = file_path or Workspace().get_mapping_rules_path()
        self.rules: Dict[str, StoredMapping] = {}

        self.load()

    def load(self):
        """Loads rules from disk."""
        if not os.path.exists(self.file_path):
            logger.info("No mapping rules found. Starting fresh.")
            return

        try:
            with open(self.file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            self.rules = {key: StoredMapping(**val) for key, val in data.items()}
            logger.info(f"Mapping rules loaded: {len(self.rules)} fingerprints.")
        except Exception as e:
            logger.error(f"Failed to load mapping rules: {e}")
            self.rules = {}

    def save(self) -> bool:
        """Saves rules to disk."""
        try:
            data = {k: v.model_dump(mode='json') for k, v in self.rules.items()}
            with open(self.file_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            logger.info("Mapping rules saved.")
            return True
        except Exception as e:
            logger.error(f"Failed to save mapping rules: {e}")
            return False

    def lookup(self, fingerprint: str) -> Optional[StoredMapping]:
        if not fingerprint:
            return None
        return self.rules.get(fingerprint)

    def remember(self, fingerprint: str, mapping: ColumnMapping, auto_import: bool = False) -> bool:
        if not fingerprint:
            logger.warning("Refusing to store a mapping for an empty fingerprint.")
            return False
        self.rules[fingerprint] = StoredMapping(mapping=mapping, auto_import=auto_import)
        return self.save()

    def forget(self, fingerprint: str) -> bool:
        if self.rules.pop(fingerprint, None) is None:
            return False
        return self.save()
