from __future__ import annotations


class UsageError(RuntimeError):
    pass


class UserAbort(Exception):
    def __init__(self, reason: str = "") -> None:
        super().__init__(reason or "aborted by user")
        self.reason = reason
