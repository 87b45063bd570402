from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from upload_gateway.validation import constraints_for


class ConfigurationError(RuntimeError):
    """Raised when an upload endpoint cannot be initialized."""


class EndpointOptions(BaseModel):
    """Recognized options of a single upload endpoint."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    path: str | None = None
    url: str | None = None
    upload_only_image: bool = Field(default=True, alias="uploadOnlyImage")
    upload_param: str = Field(default="file", alias="uploadParam")
    replace: bool = False
    unique: bool = True
    translit: bool = False
    validator_options: dict[str, Any] = Field(default_factory=dict, alias="validatorOptions")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment discriminator, "production" selects the production static host
    app_env: str = Field(default="development")

    # Remote static host (S3 compatible)
    static_domain: str = Field(default="example.com")
    static_use_ssl: bool = Field(default=True)
    static_access_key: str = Field(default="minioadmin")
    static_secret_key: str = Field(default="minioadmin123")
    static_bucket: str = Field(default="static")
    static_service_prefix: str = Field(default="service/")

    # Remote-sync naming
    sync_max_size: int = Field(default=2 * 1024 * 1024)
    sync_forced_extension: str = Field(default="png")

    # App
    log_level: str = Field(default="INFO")

    # Upload endpoints, keyed by the name used in the route
    upload_endpoints: dict[str, EndpointOptions] = Field(default_factory=dict)

    @property
    def is_production(self) -> bool:
        return self.app_env.lower() in ("prod", "production")


@dataclass(frozen=True)
class UploadConfig:
    """Immutable configuration of one upload endpoint."""

    destination_path: Path
    public_base_url: str
    upload_param: str = "file"
    only_images: bool = True
    unique_names: bool = True
    translit: bool = False
    allow_replace: bool = False
    validator_options: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_options(cls, options: EndpointOptions | Mapping[str, Any]) -> "UploadConfig":
        """Validate endpoint options and create the destination directory.

        Raises ConfigurationError when ``url`` or ``path`` is missing, when the
        validator options name an unknown constraint, or when the directory
        cannot be created.
        """
        if not isinstance(options, EndpointOptions):
            try:
                options = EndpointOptions.model_validate(options)
            except ValidationError as e:
                raise ConfigurationError(f"Invalid upload endpoint options: {e}") from e

        if options.url is None:
            raise ConfigurationError('The "url" attribute must be set.')
        if options.path is None:
            raise ConfigurationError('The "path" attribute must be set.')

        try:
            constraints_for(options.upload_only_image, options.validator_options)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid validator options: {e}") from e

        destination = Path(options.path).expanduser()
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                "Directory specified in 'path' attribute doesn't exist or cannot be created."
            ) from e

        return cls(
            destination_path=destination,
            public_base_url=options.url.rstrip("/") + "/",
            upload_param=options.upload_param,
            only_images=options.upload_only_image,
            unique_names=options.unique,
            translit=options.translit,
            allow_replace=options.replace,
            validator_options=MappingProxyType(dict(options.validator_options)),
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
