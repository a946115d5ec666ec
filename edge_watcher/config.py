"""edge-watcher — Configuration.

Configuration is loaded from (in order of increasing priority):
    1. Built-in defaults (this file)
    2. System config: /etc/edge-watcher/config.yaml
    3. User config:   ~/.edge-watcher/config.yaml
    4. Explicit file passed with ``--config``
    5. Environment variables prefixed with EDGE_WATCHER_
       (nested blocks use ``__``, e.g. EDGE_WATCHER_REDIS__HOST)

Settings are fixed once the watcher is constructed.  Call
``Settings.load()`` once at startup and pass the instance down.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from edge_watcher.watcher.models import (
    EdgeDefinition,
    PublishAction,
    ReactionAction,
    ReactionSpec,
    SetFieldAction,
)


# ---------------------------------------------------------------------------
# Sub-configuration blocks
# ---------------------------------------------------------------------------


class RedisConfig(BaseModel):
    host: str = "192.168.7.1"
    port: int = Field(default=6379, ge=1, le=65535)
    db: int = Field(default=0, ge=0)
    password: str | None = Field(
        default=None,
        description="Redis AUTH password. None = no password set.",
    )
    connect_timeout_seconds: Annotated[float, Field(gt=0, le=300)] = Field(
        default=5.0,
        description="Timeout for establishing the TCP connection.",
    )
    socket_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        le=300,
        description=(
            "Timeout for each command once connected. None = wait indefinitely "
            "(a stalled server then stalls the watch loop)."
        ),
    )


class WatchConfig(BaseModel):
    record_key: str = Field(default="vehicle", min_length=1, description="Hash holding the observed field.")
    field_name: str = Field(default="state", min_length=1)
    poll_interval_seconds: Annotated[float, Field(gt=0, le=3600)] = Field(
        default=0.5,
        description="Sampling cadence.",
    )


class EdgeConfig(BaseModel):
    from_value: str = Field(default="stand-by", min_length=1)
    to_value: str = Field(default="parked", min_length=1)

    @model_validator(mode="after")
    def _values_differ(self) -> "EdgeConfig":
        if self.from_value == self.to_value:
            raise ValueError("edge from_value and to_value must differ")
        return self


class SetFieldReaction(BaseModel):
    record_key: str = Field(default="dashboard", min_length=1)
    field_name: str = Field(default="ready", min_length=1)
    value: str = "true"


class PublishReaction(BaseModel):
    topic: str = Field(default="dashboard", min_length=1)
    message: str = "ready"


class ReactionConfig(BaseModel):
    """Side effects performed when the edge fires.  Set a block to null to disable it."""

    set_field: SetFieldReaction | None = Field(default_factory=SetFieldReaction)
    publish: PublishReaction | None = Field(default_factory=PublishReaction)


class LoggingConfig(BaseModel):
    level: Literal["debug", "info", "warning", "error", "critical"] = "info"
    format: Literal["json", "console"] = "console"
    file: Path | None = None


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EDGE_WATCHER_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    redis: RedisConfig = Field(default_factory=RedisConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    edge: EdgeConfig = Field(default_factory=EdgeConfig)
    reactions: ReactionConfig = Field(default_factory=ReactionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment beats values read from YAML files (passed as init kwargs).
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def load(cls, config_file: Path | None = None) -> "Settings":
        """Load settings from file + environment variables."""
        data: dict[str, object] = {}

        candidates = [
            Path("/etc/edge-watcher/config.yaml"),
            Path.home() / ".edge-watcher" / "config.yaml",
        ]
        if config_file:
            candidates.append(config_file)

        for path in candidates:
            if path.exists():
                import yaml  # lazy import — only needed when a file exists

                with path.open() as f:
                    loaded = yaml.safe_load(f) or {}
                    data.update(loaded)

        return cls(**data)

    def edge_definition(self) -> EdgeDefinition:
        return EdgeDefinition(from_value=self.edge.from_value, to_value=self.edge.to_value)

    def reaction_spec(self) -> ReactionSpec:
        """Reaction actions in execution order: field write, then publish."""
        actions: list[ReactionAction] = []
        if self.reactions.set_field is not None:
            sf = self.reactions.set_field
            actions.append(SetFieldAction(sf.record_key, sf.field_name, sf.value))
        if self.reactions.publish is not None:
            pub = self.reactions.publish
            actions.append(PublishAction(pub.topic, pub.message))
        return ReactionSpec.of(actions)
