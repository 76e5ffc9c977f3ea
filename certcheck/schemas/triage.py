"""Pydantic schemas for triage outcomes."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class Invalid(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str
    reasons: tuple[str, ...]

    @property
    def reason(self) -> str:
        return ",".join(self.reasons)


class Unprocessable(BaseModel):
    model_config = ConfigDict(frozen=True)

    file_name: str
    code: str  # encoding_error, oracle_*_error, transition_error, unexpected_error
    message: str


class RunResult(BaseModel):
    """Outcome of one triage pass. Sets are unordered; valid files are only counted."""

    source_dir: Path
    invalid: set[Invalid] = Field(default_factory=set)
    unprocessable: set[Unprocessable] = Field(default_factory=set)
    enumerated: int = 0
    valid: int = 0

    @property
    def outcome_count(self) -> int:
        return self.valid + len(self.invalid) + len(self.unprocessable)
