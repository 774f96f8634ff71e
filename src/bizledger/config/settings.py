"""Configuration settings for bizledger.

Settings are read once at process start (see ``bizledger.cli.main``) and passed
down to the pieces that need them. Domain services never read the environment
on their own.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """Flat settings backed by environment variables and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    database_url: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")
    db_path: Optional[str] = Field(default=None, validation_alias="BIZLEDGER_DB_PATH")
    db_host: Optional[str] = Field(default=None, validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: Optional[str] = Field(default=None, validation_alias="DB_NAME")
    db_user: Optional[str] = Field(default=None, validation_alias="DB_USER")
    db_password: Optional[SecretStr] = Field(default=None, validation_alias="DB_PASSWORD")

    # Sales API
    api_base_url: str = Field(default="http://localhost:3001", validation_alias="API_BASE_URL")
    api_timeout: float = Field(default=30.0, validation_alias="API_TIMEOUT")

    # Ledger
    tenant_id: str = Field(default="default", validation_alias="BIZLEDGER_TENANT")
    max_installments: int = Field(default=24, ge=1, validation_alias="MAX_INSTALLMENTS")

    # Spreadsheet import
    import_batch_tag: str = Field(default="IMPORT_NOV", validation_alias="IMPORT_BATCH_TAG")
    import_sheet: str = Field(default="nov", validation_alias="IMPORT_SHEET")
    import_channel: str = Field(default="Planilha Manual", validation_alias="IMPORT_CHANNEL")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", validation_alias="LOG_LEVEL"
    )
    log_format: Literal["json", "console"] = Field(default="console", validation_alias="LOG_FORMAT")

    def database_url_for(self, override: Optional[str] = None) -> str:
        """Resolve the SQLAlchemy URL to connect to.

        Order: explicit override, DATABASE_URL, PostgreSQL from the DB_* variables
        when DB_HOST is set, and finally a SQLite file.

        Args:
            override: URL or SQLite file path given on the command line

        Returns:
            SQLAlchemy database URL
        """
        if override:
            return override if "://" in override else f"sqlite:///{override}"

        if self.database_url:
            return self.database_url

        if self.db_host:
            url = URL.create(
                "postgresql+psycopg2",
                username=self.db_user,
                password=self.db_password.get_secret_value() if self.db_password else None,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            )
            return url.render_as_string(hide_password=False)

        if self.db_path:
            return f"sqlite:///{self.db_path}"

        db_dir = Path.home() / ".bizledger"
        db_dir.mkdir(exist_ok=True)
        return f"sqlite:///{db_dir / 'bizledger.db'}"


def load_settings(**overrides) -> Settings:
    """Build the settings object for this process.

    Args:
        **overrides: Field values that take precedence over the environment

    Returns:
        Settings instance
    """
    return Settings(**overrides)
