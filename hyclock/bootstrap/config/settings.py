from typing import Annotated, Literal

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from hyclock.bootstrap.config.loader import get_configfile
from hyclock.core.clock import DELIMITER, MAX_COUNTER


class ClockSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="HYCLOCK_",
        yaml_file=None,
        extra="ignore",
    )

    node_id: Annotated[
        str,
        Field(
            description=(
                "Tiebreak identifier stamped on every clock produced by this node.\n"
                "It must be unique among all nodes whose clocks are compared or merged,\n"
                f"and must not contain the '{DELIMITER}' delimiter of the canonical encoding."
            ),
            default="local",
        )
    ]

    max_drift_ms: Annotated[
        int,
        Field(
            description=(
                "Maximum distance (in milliseconds) a received clock may be ahead of\n"
                "the local wall clock. Clocks further ahead are rejected.\n"
                "0 disables the check."
            ),
            default=0,
            ge=0,
        )
    ]

    counter_warning: Annotated[
        int,
        Field(
            description=(
                "Counter value above which a warning is logged.\n"
                f"The canonical encoding holds counters up to {MAX_COUNTER}."
            ),
            default=90_000_000,
            gt=0,
            le=MAX_COUNTER,
        )
    ]

    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        Field(description="Logging verbosity.", default="INFO")
    ]

    @field_validator("node_id")
    @classmethod
    def validate_node_id(cls, v: str) -> str:
        if DELIMITER in v:
            raise ValueError(f"node_id must not contain {DELIMITER!r}")
        return v

    @classmethod
    def load(cls, configfile: str | None = None, **overrides) -> "ClockSettings":
        """
        Build the settings from keyword overrides, HYCLOCK_* environment
        variables and an optional YAML file, in that priority order.
        """
        file = get_configfile(configfile)
        if file is None:
            return cls(**overrides)

        class FileSettings(cls):
            model_config = SettingsConfigDict(yaml_file=file)

        return FileSettings(**overrides)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))
