class UserNotFoundError(Exception):
    """Raised when the requested GitHub user does not resolve."""

    def __init__(self, username: str) -> None:
        super().__init__(f"GitHub user {username!r} not found")
        self.username = username


class RemoteQueryError(Exception):
    """Raised when GitHub requests fail for reasons other than a missing user."""


class StreakUnavailableError(Exception):
    """Raised when the contribution calendar cannot produce a streak."""
