from __future__ import annotations

import io
import logging
import secrets
from typing import Callable

import qrcode

from ..core.constants import QR_TOKEN_BYTES
from ..core.exceptions import ValidationError
from .repository import UserRepository

logger = logging.getLogger(__name__)


def new_qr_token() -> str:
    return secrets.token_urlsafe(QR_TOKEN_BYTES)


class QRTokenService:
    """Use case: issue the opaque tokens users carry in their QR codes."""

    def __init__(self, users: UserRepository, *, token_factory: Callable[[], str] = new_qr_token):
        self._users = users
        self._token_factory = token_factory

    def generate_missing(self) -> int:
        users = self._users.list_without_qr_token()
        for user in users:
            self._users.set_qr_token(user.user_id, self._token_factory())
        if users:
            logger.info("Generated QR tokens for %d user(s)", len(users))
        return len(users)

    def regenerate(self, user_id: int) -> str:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise ValidationError("User not found")

        token = self._token_factory()
        if not self._users.set_qr_token(user.user_id, token):
            raise ValidationError("Failed to update QR token")
        logger.info("Regenerated QR token for user %s", user.user_id)
        return token

    def qr_png(self, user_id: int) -> bytes:
        user = self._users.get_by_id(int(user_id))
        if not user or not user.qr_token:
            raise ValidationError("User has no QR token yet")

        qr = qrcode.QRCode(
            version=1,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=10,
            border=2,
        )
        qr.add_data(user.qr_token)
        qr.make(fit=True)
        img = qr.make_image(fill_color="black", back_color="white")

        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
