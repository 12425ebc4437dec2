"""Installer configuration."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

DEFAULT_INDEX_URL = "https://download.eclipse.org"
DEFAULT_CONTAINER_DIR = Path.home() / ".javalsp" / "jdtls"

# Environment variable -> settings field
ENV_VARS = {
    "JAVALSP_INDEX_URL": "index_url",
    "JAVALSP_CONTAINER_DIR": "container_dir",
    "JAVALSP_MAX_HEAP": "max_heap",
    "JAVALSP_DATA_DIR": "data_dir",
    "JAVALSP_HTTP_TIMEOUT": "http_timeout",
    "JAVALSP_DISABLE_DOWNLOAD": "download_disabled",
}


def _truthy(value: str) -> bool:
    return value.strip().lower() in {"1", "true"}


class InstallerSettings(BaseModel):
    """Settings shared by the installer, the launch builder and the CLI."""

    index_url: str = DEFAULT_INDEX_URL
    container_dir: Path = Field(default_factory=lambda: DEFAULT_CONTAINER_DIR)
    max_heap: str = "1G"
    data_dir: str = "."
    http_timeout: float = 60.0
    download_disabled: bool = False

    @field_validator("index_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("container_dir")
    @classmethod
    def _expand_container(cls, value: Path) -> Path:
        return value.expanduser()

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any,
    ) -> "InstallerSettings":
        """Load settings from ``JAVALSP_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.
            **overrides: Explicit values (e.g. from CLI flags). ``None`` values
                are ignored.

        Returns:
            Validated settings.
        """
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}
        for var, field in ENV_VARS.items():
            raw = environ.get(var)
            if raw is None or raw == "":
                continue
            data[field] = _truthy(raw) if field == "download_disabled" else raw

        data.update({key: value for key, value in overrides.items() if value is not None})
        return cls.model_validate(data)
