"""Diagnostic models."""

from dataclasses import dataclass


@dataclass
class EnvCheckResult:
    has_api_key: bool
    api_key_length: int
    is_placeholder: bool
    status: str
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status.startswith("SUCCESS")
