"""Settings Manager - Handles API key, storage location and autosave configuration."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_AUTOSAVE_MS = 1000


class SettingsManager:
    """
    Manages environment-level configuration.

    Reads values from a .env file in the project root, overridable by the
    real environment. In-app preferences (theme, reminder hour) live in
    AppState.settings instead.
    """

    def __init__(self, project_root: Optional[Path] = None):
        """
        Initialize settings manager.

        Args:
            project_root: Path to project root where .env is located.
                         If None, searches upward from current file.
        """
        if project_root is None:
            current = Path(__file__).resolve()
            project_root = current.parent.parent.parent.parent

        env_path = project_root / ".env"
        load_dotenv(dotenv_path=env_path)

        self._project_root = project_root

    def get_gemini_api_key(self) -> Optional[str]:
        """Get the Gemini API key from environment."""
        key = os.getenv("GEMINI_API_KEY")
        return key.strip() if key and key.strip() else None

    def get_data_dir(self) -> Path:
        """Directory holding the state database; created on demand."""
        raw = (os.getenv("VOCAB_DATA_DIR") or "").strip()
        data_dir = Path(raw).expanduser() if raw else Path.home() / ".vocab_master"
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def get_db_path(self) -> Path:
        return self.get_data_dir() / "vocab_master.db"

    def get_log_dir(self) -> Path:
        raw = (os.getenv("VOCAB_LOG_DIR") or "").strip()
        return Path(raw).expanduser() if raw else self.get_data_dir() / "log"

    def get_autosave_delay_ms(self) -> int:
        """Quiet period before a coalesced save, in milliseconds."""
        raw = os.getenv("VOCAB_AUTOSAVE_MS")
        try:
            value = int(raw) if raw else DEFAULT_AUTOSAVE_MS
        except ValueError:
            return DEFAULT_AUTOSAVE_MS
        return value if value >= 0 else DEFAULT_AUTOSAVE_MS

    def reload_env(self) -> None:
        """Reload environment variables from .env file."""
        env_path = self._project_root / ".env"
        load_dotenv(dotenv_path=env_path, override=True)
