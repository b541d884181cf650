# blocklist_manager/core/config.py
from __future__ import annotations
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from blocklist_manager.core.exceptions import ConfigurationError
from blocklist_manager.core.paths import DEFAULT_UI_DIR
from blocklist_manager.core.plugin import ConfigureSpec


class Settings(BaseSettings):
    app_name: str = "Zoraxy-Blocklist-Manager"
    app_version: str = "1.0.0"
    debug: bool = False

    # where this plugin listens; Zoraxy hands the port over in the configure spec
    host: str = "127.0.0.1"
    port: int = 8000

    # upstream Zoraxy API
    zoraxy_host: str = "localhost"
    zoraxy_port: Optional[int] = None
    api_key: Optional[str] = None
    request_timeout: float = 10.0
    user_agent: str = "ZoraxyBlocklistImportPlugin/1.0"

    ui_dir: str = DEFAULT_UI_DIR

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def zoraxy_base_url(self) -> str:
        return f"http://{self.zoraxy_host}:{self.zoraxy_port}"

    def apply_runtime_config(self, spec: Optional[ConfigureSpec]) -> "Settings":
        """
        Overlay the values Zoraxy passed at startup on top of env/.env settings.
        Values the host left out keep their current setting.
        """
        if spec is None:
            return self
        update = {"port": spec.port}
        if spec.api_key:
            update["api_key"] = spec.api_key
        if spec.zoraxy_port:
            update["zoraxy_port"] = spec.zoraxy_port
        if spec.runtime_const.development_build:
            update["debug"] = True
        return self.model_copy(update=update)

    def require_upstream(self) -> None:
        if not self.api_key:
            raise ConfigurationError("missing API Key in runtime configuration")
        if not self.zoraxy_port:
            raise ConfigurationError("missing Zoraxy Port in runtime configuration")
