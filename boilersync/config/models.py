from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class PathPair(BaseModel):
    """An explicit local/remote path mapping. Never treated as a glob."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    local_path: str = Field(min_length=1)
    remote_path: str | None = Field(default=None, alias="source_path")

    @property
    def resolved_remote_path(self) -> str:
        return self.remote_path or self.local_path


class SourceSpec(BaseModel):
    """One remote repository and the files to pull from it."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    repository: str = Field(alias="source", description="Repository in owner/repo format")
    ref: str | None = None
    credential: str | None = Field(default=None, alias="token", repr=False)
    identity_files: list[str] = Field(default_factory=list, alias="files")
    path_pairs: list[PathPair] = Field(default_factory=list, alias="mappings")

    @field_validator("repository")
    @classmethod
    def validate_repository(cls, v: str) -> str:
        parts = v.split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            raise ValueError(f"repository must be in 'owner/repo' format, got {v!r}")
        return v

    @field_validator("ref", "credential")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        return v or None

    @field_validator("identity_files")
    @classmethod
    def validate_identity_files(cls, v: list[str]) -> list[str]:
        files = [f.strip() for f in v]
        if any(not f for f in files):
            raise ValueError("files entries must be non-empty strings")
        return files

    @model_validator(mode="after")
    def require_files(self) -> "SourceSpec":
        if not self.identity_files and not self.path_pairs:
            raise ValueError(
                f"source {self.repository!r} must list at least one entry in 'files' or 'mappings'"
            )
        return self


class OutputConfig(BaseModel):
    summary_path: str | None = None
    json_path: str | None = None


class BoilersyncConfig(BaseModel):
    sources: list[SourceSpec] = Field(default_factory=list)
    token_env: str = "GITHUB_TOKEN"
    source_token_env: str = "SOURCE_TOKEN"
    github_api_url: str | None = None
    workspace: str = "."
    create_missing: bool = True
    fail_on_error: bool = False
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
