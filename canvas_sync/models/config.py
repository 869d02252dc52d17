"""
Pydantic model for application configuration.
Provides robust validation for all settings.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_BASE_URL = "https://oc.sjtu.edu.cn"

# Canvas caps per_page at 100; only a single page is ever requested.
MAX_PER_PAGE = 100


class SyncConfig(BaseModel):
    """A validated configuration model for the application."""

    model_config = ConfigDict(validate_assignment=True, str_strip_whitespace=True)

    # Authentication & API
    token: str = ""
    base_url: str = DEFAULT_BASE_URL
    per_page: int = MAX_PER_PAGE

    # Download Settings
    output_dir: str = "."
    dry_run: bool = False
    record_failed_downloads: bool = True

    # Internal fields not loaded from INI file
    config_path: str = Field(..., repr=False)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Requires an http(s) URL and drops any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://.")
        return v.rstrip("/")

    @field_validator("per_page")
    @classmethod
    def validate_per_page(cls, v: int) -> int:
        if v < 1 or v > MAX_PER_PAGE:
            raise ValueError(f"per_page must be between 1 and {MAX_PER_PAGE}.")
        return v

    @field_validator("output_dir")
    @classmethod
    def validate_output_dir(cls, v: str) -> str:
        if not v:
            raise ValueError("Output directory cannot be empty.")
        return v

    @model_validator(mode="after")
    def validate_auth(self) -> "SyncConfig":
        """Validates that an access token is configured."""
        if not self.token:
            raise ValueError(
                "Authentication not configured. Generate an access token in "
                "Canvas (Account > Settings) and run 'canvas-sync init <TOKEN>'."
            )
        return self

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path", "dry_run"}
        return {key for key in cls.model_fields if key not in internal_fields}
