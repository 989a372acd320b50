from .security import (
    TokenIssueError,
    create_access_token,
    get_password_hash,
    verify_password,
)

__all__ = [
    "TokenIssueError",
    "create_access_token",
    "get_password_hash",
    "verify_password",
]
