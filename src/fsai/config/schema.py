"""
Pydantic configuration schema for FSai.

Two kinds of configuration exist:

- ``Settings``: the small user-facing settings object (credential, root access,
  multimedia support) persisted as JSON and changed at runtime through the
  settings store.
- ``Config``: agent tuning and audit logging, loaded from YAML and the
  environment at startup.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

# =============================================================================
# User Settings
# =============================================================================


class Settings(BaseModel):
    """User settings read by the access guard and the model gateway on every call.

    Instances are immutable; an update produces a new value.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    credential: str = ""
    allow_root_access: bool = False
    multimedia_support: bool = False

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_api_key(cls, data: Any) -> Any:
        # Older settings files stored the credential under "apiKey"
        if isinstance(data, dict) and "apiKey" in data and "credential" not in data:
            data = {**data, "credential": data["apiKey"]}
            data.pop("apiKey")
        return data

    @property
    def is_configured(self) -> bool:
        """Whether a model credential is available."""
        return bool(self.credential)

    def masked(self) -> dict[str, Any]:
        """Settings as a dict with the credential hidden."""
        data = self.model_dump(by_alias=True)
        if self.credential:
            data["credential"] = f"{self.credential[:4]}…{'*' * 8}"
        return data


# =============================================================================
# Agent Configuration
# =============================================================================


class AgentConfig(BaseModel):
    """Agent turn execution and prompt-context configuration."""

    model_config = ConfigDict(extra="allow")

    model: str = Field(
        default="gemini/gemini-2.5-flash",
        description="LiteLLM model identifier used for every turn",
    )

    temperature: float = Field(default=0.0, ge=0.0, le=2.0)

    max_iterations: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum follow-up rounds per user turn",
    )

    timeout_per_call: int = Field(
        default=300,
        ge=10,
        le=600,
        description="Timeout for a single model call in seconds",
    )

    history_message_limit: int = Field(
        default=20,
        ge=1,
        description="Number of most recent non-system messages considered for context",
    )

    history_char_budget: int = Field(
        default=1500,
        ge=100,
        description="Character budget for history on the initial request of a turn",
    )

    followup_history_char_budget: int = Field(
        default=1000,
        ge=100,
        description="Character budget for history on follow-up requests",
    )

    file_snippet_limit: int = Field(
        default=5,
        ge=0,
        description="Number of previously read files included in context",
    )

    file_preview_chars: int = Field(default=1000, ge=50)
    followup_file_preview_chars: int = Field(default=500, ge=50)
    read_result_preview_chars: int = Field(default=2000, ge=100)

    auto_confirm_low_risk: bool = Field(
        default=False,
        description="Auto-accept a lone low-risk proposal",
    )


# =============================================================================
# Audit Configuration
# =============================================================================


class AuditLogConfig(BaseModel):
    """Audit logging configuration."""

    enable: bool = True
    path: str | None = None  # None = <fsai home>/audit.jsonl
    rotation: Literal["daily", "size"] = "daily"
    max_size_mb: int = Field(default=20, ge=1)
    retention_days: int = Field(default=90, ge=1)
    compress_old: bool = True
    include_content: bool = False
    buffer_size: int = Field(default=20, ge=1)
    flush_interval_seconds: int = Field(default=5, ge=0)


# =============================================================================
# Root Configuration Model
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for FSai.

    Loaded from YAML and environment variables, merged in order of priority.
    """

    model_config = ConfigDict(extra="allow")

    agent: AgentConfig = Field(default_factory=AgentConfig)
    audit_log: AuditLogConfig = Field(default_factory=AuditLogConfig)
