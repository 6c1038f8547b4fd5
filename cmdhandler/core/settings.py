"""
Settings for the command handler. Every handler option lives here and is
read from the environment (or ``.env``) by pydantic-settings.
"""

from typing import TYPE_CHECKING, Annotated, Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode

DEFAULT_COLOR: int = 0x03A9F4


class Settings(BaseSettings):
    if TYPE_CHECKING:  # pragma: no cover

        def __init__(self, **data: Any) -> None: ...

    """
    Settings for the command handler.

    ``prefix`` is the global prefix. It is ALWAYS active and is never replaced
    by a guild prefix; guild prefixes only add a second trigger.
    """

    prefix: str

    # Bot owner Discord user ID – gets FULL permission for ALL commands
    owner_id: int | None = None
    owner_perm_level: int = 10  # level granted to guild owners by the default provider
    default_color: int = DEFAULT_COLOR  # embed colour for help / error output

    # --- logging toggles ---
    use_default_logger: bool = True
    log_to_console: bool = True
    verbose_log: bool = False

    # --- parsing toggles ---
    invoke_to_lower: bool = True
    parse_msg_edit: bool = True
    parse_dm: bool = False

    # --- collaborator timeouts (seconds, None = wait forever) ---
    store_timeout: float | None = Field(default=5.0, gt=0)
    permission_timeout: float | None = Field(default=10.0, gt=0)

    # SQLite file for the default store; None keeps everything in memory
    db_name: str | None = None

    # --- launcher only ---
    discord_token: str | None = None
    command_packages: Annotated[list[str], NoDecode] = []

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @field_validator("prefix")
    @classmethod
    def _prefix_not_blank(cls, v: str) -> str:
        if not v or v.isspace():
            raise ValueError("prefix must be a non-empty string")
        return v

    @field_validator("command_packages", mode="before")
    @classmethod
    def _split_csv(cls, v: Any) -> list[str]:  # noqa: D401
        """
        Allow simple comma‑separated strings in .env:

            COMMAND_PACKAGES=mybot.commands,mybot.admin
        """
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        if isinstance(v, list):
            return [str(item) for item in v]
        return []
