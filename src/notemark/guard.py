"""Single-use confirmation tokens for destructive note operations.

A caller first asks for a dry run, which previews the change and issues a
token bound to (tool, target, action). Executing the change requires handing
that token back before it expires.
"""

import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Literal

FailureReason = Literal["missing", "invalid", "expired", "mismatch"]


@dataclass(frozen=True)
class Confirmation:
    token: str
    expires_at: float

    def expires_at_iso(self) -> str:
        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc).isoformat()


@dataclass(frozen=True)
class GuardResult:
    ok: bool
    reason: FailureReason | None = None


def _normalize(tool: str, target: str, action: str) -> tuple[str, str, str]:
    return (tool.strip().lower(), target.strip().lower(), action.strip().lower())


class ConfirmationGuard:
    def __init__(self, ttl_seconds: float = 600, clock: Callable[[], float] = time.time):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._pending: dict[str, tuple[tuple[str, str, str], float]] = {}

    def _purge(self, now: float) -> None:
        for token, (_ctx, expires_at) in list(self._pending.items()):
            if expires_at <= now:
                del self._pending[token]

    def issue(self, tool: str, target: str, action: str) -> Confirmation:
        expires_at = self.clock() + self.ttl_seconds
        token = secrets.token_urlsafe(16)
        self._pending[token] = (_normalize(tool, target, action), expires_at)
        return Confirmation(token=token, expires_at=expires_at)

    def consume(self, token: str | None, tool: str, target: str, action: str) -> GuardResult:
        """Validate a token and spend it. A token never validates twice."""
        if not token or not token.strip():
            return GuardResult(False, "missing")

        now = self.clock()
        entry = self._pending.pop(token, None)
        if entry is None:
            self._purge(now)
            return GuardResult(False, "invalid")

        context, expires_at = entry
        self._purge(now)
        if expires_at <= now:
            return GuardResult(False, "expired")
        if context != _normalize(tool, target, action):
            return GuardResult(False, "mismatch")
        return GuardResult(True)
