import base64
import logging
from io import BytesIO

import qrcode
from PIL import Image
from qrcode.constants import ERROR_CORRECT_M

logger = logging.getLogger(__name__)


DEFAULT_SIZE = 256
DEFAULT_MARGIN = 4
DEFAULT_DARK = "#000000"
DEFAULT_LIGHT = "#FFFFFF"


def generate_qr_code(
    text: str,
    size: int = DEFAULT_SIZE,
    margin: int = DEFAULT_MARGIN,
    dark: str = DEFAULT_DARK,
    light: str = DEFAULT_LIGHT,
) -> bytes:
    """Render ``text`` as a square PNG of ``size`` pixels."""
    if not text:
        raise ValueError("QR code text must not be empty.")
    try:
        qr = qrcode.QRCode(error_correction=ERROR_CORRECT_M, box_size=10, border=margin)
        qr.add_data(text)
        qr.make(fit=True)
        image = qr.make_image(fill_color=dark, back_color=light).get_image()
        image = image.convert("RGB").resize((size, size), Image.NEAREST)

        buffer = BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()
    except Exception as exc:
        logger.exception("QR code generation failed text_len=%d", len(text))
        raise RuntimeError("Failed to generate QR code") from exc


def to_data_url(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
