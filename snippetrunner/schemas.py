"""Pydantic schemas for snippet metadata and run results."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class SnippetStatus(str, Enum):
    """Outcome of a single snippet run."""

    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class SnippetInfo(BaseModel):
    """Catalogue entry for a registered snippet."""

    snippet_id: str = Field(..., pattern=r"^[a-z0-9_-]+(/[a-z0-9_-]+)*$")
    topic: str
    title: str
    description: str = ""
    is_async: bool = False


class SnippetResult(BaseModel):
    """Result of running one snippet."""

    snippet_id: str
    status: SnippetStatus
    lines: list[str] = Field(default_factory=list)
    error: str | None = None
    error_type: str | None = None
    duration_ms: float = Field(default=0.0, ge=0.0)
    output_hash: str = Field(..., pattern=r"^sha256:[a-f0-9]{64}$")
    was_truncated: bool = False

    @property
    def ok(self) -> bool:
        return self.status == SnippetStatus.COMPLETED


class RunReport(BaseModel):
    """Results of a sequential batch of snippet runs."""

    results: list[SnippetResult] = Field(default_factory=list)
    total: int = 0
    completed: int = 0
    failed: int = 0
    summary: str = ""
