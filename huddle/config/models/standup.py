"""Standup engine configuration models."""

from pydantic import BaseModel, Field, model_validator


class StandupConfig(BaseModel):
    """Interview limits, timeout windows and status bucketing for a run."""

    max_phase_a_items: int = Field(
        default=3,
        ge=1,
        description="Maximum in-progress items asked about in Phase A",
    )
    phase_b_max_phase_a_items: int = Field(
        default=2,
        ge=0,
        description="Phase B is asked only with at most this many in-progress items",
    )
    max_phase_b_items: int = Field(
        default=3,
        ge=1,
        description="Maximum not-started items asked about in Phase B",
    )
    max_exchanges: int = Field(
        default=3,
        ge=1,
        description="Replies consumed per phase before the phase is force-closed",
    )
    min_summary_chars: int = Field(
        default=40,
        ge=0,
        description="Summary length that counts as a detailed free-text answer",
    )
    initial_timeout_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Wait before sending a reminder",
    )
    final_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Wait after the reminder before skipping the participant",
    )
    classifier_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on a single classification call",
    )
    tracker_timeout_seconds: float = Field(
        default=15.0,
        gt=0,
        description="Upper bound on a single tracker call",
    )
    narrator_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Upper bound on writing a redirect or the run summary",
    )
    continue_after_forced_close: bool = Field(
        default=False,
        description="Move on to Phase B when Phase A hits the exchange cap",
    )
    in_progress_statuses: list[str] = Field(
        default_factory=lambda: ["in progress", "in review", "in development"],
        description="Lowercase status fragments bucketed into Phase A",
    )
    not_started_statuses: list[str] = Field(
        default_factory=lambda: ["to do", "todo", "open", "backlog", "selected for development"],
        description="Lowercase status fragments bucketed into Phase B",
    )

    @model_validator(mode="after")
    def _final_window_shorter(self) -> "StandupConfig":
        if self.final_timeout_seconds >= self.initial_timeout_seconds:
            raise ValueError(
                "final_timeout_seconds must be strictly shorter than initial_timeout_seconds"
            )
        return self
