from __future__ import annotations

from typing import BinaryIO

from PIL import Image, UnidentifiedImageError
from pyzbar.pyzbar import decode as pyzbar_decode

from ..core.exceptions import InvalidToken, ValidationError


def decode_qr_image(stream: BinaryIO) -> str:
    """Return the payload of the first QR code found in an uploaded image."""
    try:
        img = Image.open(stream).convert("RGB")
    except (UnidentifiedImageError, OSError):
        raise ValidationError("Uploaded file is not an image")

    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code detected in image")
    try:
        return decoded[0].data.decode("utf-8").strip()
    except UnicodeDecodeError:
        # Tokens are ASCII; anything else cannot belong to a user.
        raise InvalidToken()
