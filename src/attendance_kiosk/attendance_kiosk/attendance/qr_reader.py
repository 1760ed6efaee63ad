from __future__ import annotations

import json
from typing import BinaryIO

from PIL import Image

from ..core.exceptions import ValidationError


def parse_qr_payload(text: str, *, expected_type: str) -> str:
    """Extract the employee identifier from a badge QR payload.

    Badges carry JSON like {"email": ..., "name": ..., "type": expected_type};
    ``userId`` is accepted in place of ``email`` for older badges.
    """

    try:
        data = json.loads(text)
    except ValueError:
        raise ValidationError("Invalid QR code format") from None

    if not isinstance(data, dict) or data.get("type") != expected_type:
        raise ValidationError("Invalid QR code format")

    identifier = data.get("email") or data.get("userId")
    if not identifier:
        raise ValidationError("Invalid QR code format")
    return str(identifier).strip()


def decode_qr_image(stream: BinaryIO) -> str:
    """Return the text of the first QR code found in an uploaded image."""
    # pyzbar loads the zbar shared library on import.
    from pyzbar.pyzbar import decode as pyzbar_decode

    img = Image.open(stream).convert("RGB")
    decoded = pyzbar_decode(img)
    if not decoded:
        raise ValidationError("No QR code found in image")
    return decoded[0].data.decode("utf-8").strip()
