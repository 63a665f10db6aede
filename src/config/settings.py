"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use MDBOOK_SVGDX_ prefix (e.g., MDBOOK_SVGDX_SVGDX_COMMAND=/opt/bin/svgdx).

Settings can also be loaded from a .env file in the working directory.
These cover how the svgdx executable is run; per-book rendering options live
in book.toml (see lib/options.py).
"""

import shlex
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use MDBOOK_SVGDX_ prefix.

    Examples:
        MDBOOK_SVGDX_SVGDX_COMMAND="cargo run --release --bin svgdx --"
        MDBOOK_SVGDX_RENDER_TIMEOUT=30
    """

    model_config = SettingsConfigDict(
        env_prefix="MDBOOK_SVGDX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Renderer configuration
    svgdx_command: str = Field(
        default="svgdx",
        description="Command used to run svgdx (split shell-style, source read from stdin)",
    )

    render_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds before a single svgdx run is abandoned (None waits indefinitely)",
    )

    # Output configuration
    svg_style: str = Field(
        default="min-width: 25%; max-width: 100%; height: auto;",
        description="Style applied to the root <svg> element when svgdx sets none",
    )

    def command_make(self) -> List[str]:
        """
        Split svgdx_command into an argument list.

        Returns:
            Argument vector (e.g., ["svgdx"])

        Example:
            >>> AppSettings(svgdx_command="/opt/svgdx --debug").command_make()
            ['/opt/svgdx', '--debug']
        """
        return shlex.split(self.svgdx_command)


# Singleton instance - import this in your code
appsettings = AppSettings()
