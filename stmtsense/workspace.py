import os
from pathlib import Path
from stmtsense.data.constants import WORKSPACE_HOME_ENV, WORKSPACE_DIRNAME, MAPPING_RULES_FILENAME

class Workspace:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Workspace, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        override = os.environ.get(WORKSPACE_HOME_ENV)
        self.base_path = Path(override) if override else Path.home() / WORKSPACE_DIRNAME
        self.configs_dir = self.base_path / "configs"

        self._ensure_structure()
        self._initialized = True

    def _ensure_structure(self):
        """Ensures that the workspace directory structure exists."""
        for directory in [self.base_path, self.configs_dir]:
            directory.mkdir(parents=True, exist_ok=True)

    def get_mapping_rules_path(self) -> str:
        """Returns the absolute path for mapping_rules.json."""
        return str(self.configs_dir / MAPPING_RULES_FILENAME)
