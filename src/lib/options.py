"""
Rendering options for svgdx blocks

The `[preprocessor.svgdx]` table of book.toml (or the YAML mapping given to
the standalone command) is validated once per run into a frozen RenderConfig
that every block of every chapter shares.

Example book.toml:

    [preprocessor.svgdx]
    scale = 2.0
    theme = "dark"
    add-auto-styles = false
"""

from typing import Any, Dict, FrozenSet, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .log import LOG


# Keys mdbook itself puts in the preprocessor table; accepted and ignored
RESERVED_KEYS: FrozenSet[str] = frozenset({"command"})


class RenderConfig(BaseModel):
    """
    Immutable svgdx rendering options

    Field names use underscores; the accepted keys are the hyphenated
    aliases (e.g., "loop-limit"). Options left as None defer to the
    renderer's own default.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        coerce_numbers_to_str=True,
    )

    scale: float = Field(default=1.5, gt=0, description="Output magnification")
    border: Optional[int] = Field(
        default=None, ge=0, description="Padding around the rendered image"
    )
    add_auto_styles: Optional[bool] = Field(
        default=None, alias="add-auto-styles", description="Inject default styling"
    )
    background: Optional[str] = Field(default=None, description="Canvas background mode")
    seed: Optional[int] = Field(default=None, description="Random number seed")
    loop_limit: Optional[int] = Field(
        default=None, ge=0, alias="loop-limit", description="Loop iteration ceiling"
    )
    var_limit: Optional[int] = Field(
        default=None, ge=0, alias="var-limit", description="Variable expansion ceiling"
    )
    font_size: Optional[str] = Field(
        default=None, alias="font-size", description="Default text size"
    )
    font_family: Optional[str] = Field(
        default=None, alias="font-family", description="Default typeface"
    )
    theme: Optional[str] = Field(default=None, description="Named style theme")


def config_parse(table: Optional[Mapping[str, Any]]) -> RenderConfig:
    """
    Validate a raw option table into a RenderConfig

    Args:
        table: Mapping of option keys to values, or None for all defaults

    Returns:
        Frozen RenderConfig

    Raises:
        ConfigError: On an unknown key or a value that does not fit its type.
                     The error carries the offending key and value.

    Example:
        >>> config_parse({"scale": 2, "loop-limit": 500}).loop_limit
        500
    """
    if table is None:
        return RenderConfig()
    if not isinstance(table, Mapping):
        raise ConfigError(
            f"svgdx options must be a table, got {type(table).__name__}",
            key="preprocessor.svgdx",
            value=table,
        )

    options: Dict[str, Any] = {}
    for key, value in table.items():
        if key in RESERVED_KEYS:
            LOG(f"Ignoring reserved option '{key}'", level=3)
            continue
        options[key] = value

    try:
        return RenderConfig.model_validate(options)
    except ValidationError as e:
        detail = e.errors()[0]
        key = str(detail["loc"][0]) if detail["loc"] else "?"
        value = options.get(key)
        if detail["type"] == "extra_forbidden":
            raise ConfigError(f"Unknown svgdx option '{key}'", key=key, value=value) from e
        raise ConfigError(
            f"Invalid value {value!r} for svgdx option '{key}': {detail['msg']}",
            key=key,
            value=value,
        ) from e
