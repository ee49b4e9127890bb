from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", frozen=True)

    # Listener
    listen_host: str = "0.0.0.0"
    listen_port: int = 8080

    # GitLab
    gitlab_url: str
    trigger_token: str | None = None
    private_token: str | None = None
    request_timeout: float = 30.0

    # Policy
    trigger_merged: bool = False
    remove_source_exceptions: Annotated[list[str], NoDecode] = Field(default_factory=list)
    serialize_commits: bool = False

    log_level: str = "INFO"

    @field_validator("gitlab_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("remove_source_exceptions", mode="before")
    @classmethod
    def split_exceptions(cls, value):
        """Accept a comma-separated string, as given on the command line or in env."""
        if isinstance(value, str):
            return [branch.strip() for branch in value.split(",") if branch.strip()]
        return value

    @model_validator(mode="after")
    def check_credentials(self):
        if bool(self.trigger_token) == bool(self.private_token):
            raise ValueError("Specify exactly one of trigger_token or private_token")
        return self
