"""Records produced by the scraper and results produced by a batch run."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class Connection:
    """A scraped connection: display name plus profile URL."""

    name: str
    profile_url: str

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Connection.name must be non-empty")
        if not self.profile_url or not self.profile_url.strip():
            raise ValueError("Connection.profile_url must be non-empty")

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "profileUrl": self.profile_url}

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "Connection":
        return cls(
            name=str(payload.get("name") or "").strip(),
            profile_url=str(payload.get("profileUrl") or payload.get("profile_url") or "").strip(),
        )


@dataclass(frozen=True)
class OutcomeEntry:
    index: int
    name: str
    profile_url: str
    status: str
    reason: Optional[str] = None

    def describe(self, total: int) -> str:
        mark = "OK" if self.status == "messaged" else "FAILED"
        suffix = f" ({self.reason})" if self.reason else ""
        return f"[{self.index}/{total}] {mark} {self.name} - {self.profile_url}{suffix}"


@dataclass
class RunResult:
    """Accumulator threaded through the batch loop.

    ``total`` is derived so ``success_count + failure_count == total`` always
    holds.
    """

    success_count: int = 0
    failure_count: int = 0
    transcript: List[OutcomeEntry] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success_count + self.failure_count

    @property
    def success_rate(self) -> float:
        if not self.total:
            return 0.0
        return self.success_count / self.total * 100

    def record(self, connection: Connection, ok: bool, *, reason: str | None = None) -> OutcomeEntry:
        if ok:
            self.success_count += 1
        else:
            self.failure_count += 1
        entry = OutcomeEntry(
            index=self.total,
            name=connection.name,
            profile_url=connection.profile_url,
            status="messaged" if ok else "failed",
            reason=None if ok else reason,
        )
        self.transcript.append(entry)
        return entry

    def transcript_lines(self, planned: int | None = None) -> List[str]:
        total = planned if planned is not None else self.total
        return [entry.describe(total) for entry in self.transcript]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success_count": self.success_count,
            "failure_count": self.failure_count,
            "total": self.total,
            "transcript": [asdict(entry) for entry in self.transcript],
        }


__all__ = ["Connection", "OutcomeEntry", "RunResult"]
