"""Data models for installation results."""

from dataclasses import dataclass, field
from enum import Enum


class InstallationOutcome(Enum):
    ALREADY_PRESENT = "already_present"
    INSTALLED = "installed"
    SKIPPED_WITH_WARNING = "skipped_with_warning"
    FAILED = "failed"

    @property
    def icon(self) -> str:
        return {
            "already_present": "✅",
            "installed": "✅",
            "skipped_with_warning": "⚠️",
            "failed": "❌",
        }[self.value]


@dataclass
class StepResult:
    name: str
    outcome: InstallationOutcome
    detail: str = ""
    url: str | None = None

    @property
    def degraded(self) -> bool:
        return self.outcome in (
            InstallationOutcome.SKIPPED_WITH_WARNING,
            InstallationOutcome.FAILED,
        )


@dataclass
class BootstrapReport:
    steps: list[StepResult] = field(default_factory=list)

    def add(self, *results: StepResult) -> None:
        self.steps.extend(results)

    def get(self, name: str) -> StepResult | None:
        return next((s for s in self.steps if s.name == name), None)

    @property
    def warnings(self) -> list[StepResult]:
        return [s for s in self.steps if s.degraded]

    @property
    def installed(self) -> list[StepResult]:
        return [s for s in self.steps if s.outcome == InstallationOutcome.INSTALLED]


__all__ = [
    "InstallationOutcome",
    "StepResult",
    "BootstrapReport",
]
