from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from equiring.bootstrap.config.loader import get_configfile


class InventorySettings(BaseModel):
    file: Annotated[
        Path,
        Field(
            description=(
                "Path to the YAML document describing the live cluster:\n"
                "the partitioner (or explicit ring bounds) and, for every node,\n"
                "its address, datacenter, current token and reported load."
            )
        )
    ]

    resolve: Annotated[
        bool,
        Field(
            description=(
                "Prefix every address with its canonical host name.\n"
                "Hosts are sorted by identifier when free tokens are handed out,\n"
                "so resolved names make the assignment follow host naming."
            ),
            default=True
        )
    ]

    @field_validator("file")
    @classmethod
    def validate_path(cls, v: Path, _: ValidationInfo) -> Path:
        if not v.expanduser().is_file():
            raise ValueError(f"Path {v} does not exist.")
        return v.expanduser()


class BalanceSettings(BaseModel):
    dry_run: Annotated[
        bool,
        Field(
            description="Only print the plan; never move a node.",
            default=False
        )
    ]

    force: Annotated[
        bool,
        Field(
            description=(
                "Move nodes even when the cluster already holds data.\n"
                "Moving a token streams the data it owns to another node."
            ),
            default=False
        )
    ]


class ExecutorSettings(BaseModel):
    command: Annotated[
        str,
        Field(
            description=(
                "Command moving one node to a new token.\n"
                "Placeholders: {address}, {port}, {token}."
            ),
            default="nodetool -h {address} -p {port} move {token}"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="Management port passed to the move command.",
            default=7199
        )
    ]

    timeout: Annotated[
        float,
        Field(
            description="Maximum time in seconds a single move may take.",
            default=300.0,
            gt=0
        )
    ]


class OutputSettings(BaseModel):
    format: Annotated[
        Literal["text", "yaml", "json"],
        Field(
            description="Report format.",
            default="text"
        )
    ]


class EquiringConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="EQUIRING_",
        env_nested_delimiter="__",
        extra="allow"
    )

    inventory: Annotated[
        InventorySettings,
        Field(description="Where the cluster layout is read from.")
    ]

    balance: Annotated[
        BalanceSettings,
        Field(
            description="Safety switches of a balancing run.",
            default_factory=BalanceSettings
        )
    ]

    executor: Annotated[
        ExecutorSettings,
        Field(
            description="How a node is asked to move to its new token.",
            default_factory=ExecutorSettings
        )
    ]

    output: Annotated[
        OutputSettings,
        Field(
            description="How the plan is reported.",
            default_factory=OutputSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        configfile = get_configfile()
        if configfile is None:
            return init_settings, env_settings
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=configfile),
        )
