"""Runtime configuration for docnav.

Values are read from environment variables prefixed with ``DOCNAV_`` (or a
``.env`` file). Components take an explicit ``Settings`` instance so tests can
build isolated configurations; the module-level ``settings`` is the default.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .constants import DEFAULT_FUZZY_LIMIT, ONE_HOUR


class Settings(BaseSettings):
    """Settings for the docs source, the registry and the hosting layer."""

    model_config = SettingsConfigDict(
        env_prefix="DOCNAV_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Docs Source ===
    github_api_url: str = Field(
        default="https://api.github.com", description="GitHub REST API base URL"
    )
    raw_base_url: str = Field(
        default="https://raw.githubusercontent.com",
        description="Base URL for raw file downloads",
    )
    manifest_repo: str = Field(
        default="Snazzah/slash-create",
        description="Repository ({owner}/{repo}) holding the documentation manifests",
    )
    manifest_branch: str = Field(
        default="docs", description="Branch whose tree lists one manifest per version"
    )
    docs_folder: str | None = Field(
        default=None,
        description="Folder inside the manifest branch holding the manifests (monorepos)",
    )
    github_token: str | None = Field(default=None, description="Optional GitHub API token")

    # === Catalog Rules ===
    document_extension: str = Field(default=".json", description="Manifest file extension")
    excluded_path_marker: str = Field(
        default="dependabot", description="Tree paths containing this marker are ignored"
    )
    source_root_prefix: str = Field(
        default="src", description="Only source files under this prefix are tracked"
    )

    # === Refresh & Fetch ===
    refresh_interval_seconds: float = Field(
        default=ONE_HOUR, gt=0, description="Interval between catalog refreshes"
    )
    fetch_timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP request timeout")
    fetch_max_retries: int = Field(default=3, ge=1, description="Attempts per remote fetch")
    fetch_retry_delay_seconds: float = Field(
        default=1.0, ge=0, description="Base delay for exponential backoff"
    )

    # === Queries ===
    fuzzy_limit: int = Field(
        default=DEFAULT_FUZZY_LIMIT, ge=1, description="Default maximum fuzzy results"
    )

    # === Logging / Server ===
    log_level: str = Field(default="INFO", description="Logging level")
    debug: bool = Field(default=False, description="Debug mode")

    @property
    def docs_prefix(self) -> str:
        """Folder prefix (with trailing slash) applied to manifest paths."""
        if not self.docs_folder:
            return ""
        return self.docs_folder.strip("/") + "/"


settings = Settings()
