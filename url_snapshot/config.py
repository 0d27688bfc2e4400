"""Configuration for url-snapshot using pydantic-settings.

All settings are driven by environment variables with the SNAPSHOT_ prefix.
See .env.example for the full list of configurable options.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Snapshot run configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SNAPSHOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    urls_file: Path = Path("urls.json")
    out_dir: Path = Path("out")

    # Relative to out_dir
    screenshots_dir: Path = Path("screenshots")
    html_dir: Path = Path("html")
    text_dir: Path = Path("text")
    doc_dir: Path = Path("doc")
    profile_dir: Path = Path("data-dir")

    user_agent: str = "url-snapshot/0.1 (contact: your-email@example.com)"

    navigation_timeout: float = 5.0
    probe_timeout: float = 30.0
    download_timeout: float = 120.0

    headless: bool = True
    extension_dir: Optional[Path] = None

    @property
    def screenshots_path(self) -> Path:
        return self.out_dir / self.screenshots_dir

    @property
    def html_path(self) -> Path:
        return self.out_dir / self.html_dir

    @property
    def text_path(self) -> Path:
        return self.out_dir / self.text_dir

    @property
    def doc_path(self) -> Path:
        return self.out_dir / self.doc_dir

    @property
    def profile_path(self) -> Path:
        return self.out_dir / self.profile_dir

    def ensure_dirs(self) -> None:
        """Create output directories if they don't exist."""
        for path in (
            self.screenshots_path,
            self.html_path,
            self.text_path,
            self.doc_path,
            self.profile_path,
        ):
            path.mkdir(parents=True, exist_ok=True)
            logger.debug("Ensured directory: %s", path)


def get_settings(**overrides) -> Settings:
    """Load settings from environment, applying explicit overrides."""
    return Settings(**{k: v for k, v in overrides.items() if v is not None})
