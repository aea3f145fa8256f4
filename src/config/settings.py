"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables
and an optional YAML config file. All environment variables use the PULPMD_
prefix (e.g., PULPMD_INJECT_DIR=examples, PULPMD_LEAVE_TAGS=true).

Sources, highest priority first:
    1. Explicit values (CLI flags)
    2. Environment variables
    3. .env file in the working directory
    4. YAML config file (--config, default ~/.pulpMd.yaml)
    5. Field defaults
"""

import json
from pathlib import Path
from typing import Annotated, List, Literal, Optional, Tuple, Type

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import (
    BaseSettings,
    NoDecode,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from ..lib.errors import ConfigError


DEFAULT_CONFIG_FILE = Path.home() / ".pulpMd.yaml"


class AppSettings(BaseSettings):
    """
    Injection run configuration.

    Environment variables use PULPMD_ prefix.

    Examples:
        PULPMD_INJECT_DIR=examples
        PULPMD_RECURSIVE=false
        PULPMD_EXTENSIONS=go,sh:bash
    """

    model_config = SettingsConfigDict(
        env_prefix="PULPMD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        yaml_file=DEFAULT_CONFIG_FILE,
    )

    # Snippet discovery
    inject_dir: Path = Field(
        default=Path("."),
        description="Directory searched for snippet files",
    )

    recursive: bool = Field(
        default=True,
        description="Search inject_dir recursively",
    )

    extensions: Annotated[List[str], NoDecode] = Field(
        default_factory=list,
        description="Extension filter entries: 'ext' restricts, 'ext:tag' aliases",
    )

    # Directive cleanup
    leave_tags: bool = Field(
        default=False,
        description="Leave snippet directive paragraphs in the output",
    )

    leave_quotes: bool = Field(
        default=False,
        description="Leave a block quote above a directive that injected nothing",
    )

    # Injection
    strict_mode: bool = Field(
        default=False,
        description="Strict mode: unreadable snippet files abort the run",
    )

    markdown_tag: str = Field(
        default="md",
        description="Tag whose files are spliced in as markdown instead of code",
    )

    fence_char: Literal["`", "~"] = Field(
        default="`",
        description="Character used for synthesized code fences",
    )

    lexer_tags: bool = Field(
        default=False,
        description="Resolve unmapped extensions to a Pygments lexer alias",
    )

    # Output
    reformat: bool = Field(
        default=False,
        description="Normalize rendered markdown with mdformat",
    )

    @field_validator("extensions", mode="before")
    @classmethod
    def extensions_split(cls, value):
        """Accept a comma-separated string or a JSON list as well as a list"""
        if isinstance(value, str):
            if value.lstrip().startswith("["):
                return json.loads(value)
            return [item for item in value.split(",") if item.strip()]
        return value

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def settings_load(config_file: Optional[Path] = None, **overrides) -> AppSettings:
    """
    Load settings for one run.

    Args:
        config_file: YAML config file; the default ~/.pulpMd.yaml is used
                     (if present) when None
        **overrides: Explicit values (e.g. from CLI flags); None values are
                     dropped so lower-priority sources still apply

    Returns:
        AppSettings instance

    Raises:
        ConfigError: If an explicit config_file does not exist or is not
                     valid YAML, or a value from any source is invalid

    Example:
        >>> settings = settings_load(inject_dir="examples", leave_tags=True)
        >>> settings.leave_tags
        True
    """
    explicit = {key: value for key, value in overrides.items() if value is not None}
    settings_cls = AppSettings
    if config_file is not None:
        if not config_file.is_file():
            raise ConfigError(f"Config file not found: {config_file}")

        class FileSettings(AppSettings):
            model_config = SettingsConfigDict(yaml_file=config_file)

        settings_cls = FileSettings

    try:
        return settings_cls(**explicit)
    except (ValidationError, yaml.YAMLError) as e:
        raise ConfigError(str(e)) from e
