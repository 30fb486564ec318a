"""
Install outcome models — the per-package result contract.

Install steps never raise on a failed package: every attempt produces
an ``InstallOutcome`` and the outcomes accumulate in an
``InstallReport``. Degraded runs are therefore visible in the data,
not in exception traces.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class InstallOutcome(BaseModel):
    """Result of one install attempt (a package or a group of packages)."""

    package: str
    phase: str = ""                 # core, native, git, bulk, critical
    status: Literal["installed", "failed"] = "installed"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == "installed"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def installed(cls, package: str, phase: str = "", **kwargs: Any) -> InstallOutcome:
        """Create a success outcome."""
        return cls(package=package, phase=phase, status="installed", **kwargs)

    @classmethod
    def failure(
        cls,
        package: str,
        error: str,
        phase: str = "",
        **kwargs: Any,
    ) -> InstallOutcome:
        """Create a failure outcome."""
        return cls(package=package, phase=phase, status="failed", error=error, **kwargs)


class InstallReport(BaseModel):
    """All outcomes of one installation run."""

    tool: str = ""
    outcomes: list[InstallOutcome] = Field(default_factory=list)
    bulk_ok: bool = False
    degraded: bool = False
    warnings: list[str] = Field(default_factory=list)

    def add(self, outcome: InstallOutcome) -> InstallOutcome:
        self.outcomes.append(outcome)
        return outcome

    @property
    def installed(self) -> list[str]:
        return [o.package for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[str]:
        return [o.package for o in self.outcomes if o.failed]

    def to_dict(self) -> dict[str, Any]:
        return {
            "tool": self.tool,
            "bulk_ok": self.bulk_ok,
            "degraded": self.degraded,
            "installed": self.installed,
            "failed": self.failed,
            "warnings": list(self.warnings),
        }


class VerificationReport(BaseModel):
    """Post-install import check inside the new environment."""

    python_path: str = ""
    succeeded: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)
    in_home: bool = False
    error: str | None = None

    @property
    def all_ok(self) -> bool:
        return not self.failed and self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "python_path": self.python_path,
            "succeeded": list(self.succeeded),
            "failed": list(self.failed),
            "in_home": self.in_home,
            "error": self.error,
        }
