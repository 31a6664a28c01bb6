from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_qr_token(self, qr_token: str) -> Optional[User]:
        """Exact match on an active user's token."""

        raise NotImplementedError

    def list_non_admin(self) -> Sequence[User]:
        raise NotImplementedError

    def list_without_qr_token(self) -> Sequence[User]:
        raise NotImplementedError

    def set_qr_token(self, user_id: int, qr_token: str) -> bool:
        raise NotImplementedError
