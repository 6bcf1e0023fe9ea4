import base64
import io
import logging

import qrcode
from PIL import Image, ImageColor
from qrcode.image.styledpil import StyledPilImage
from qrcode.image.styles.moduledrawers import (
    SquareModuleDrawer, GappedSquareModuleDrawer,
    CircleModuleDrawer, RoundedModuleDrawer
)
from qrcode.image.styles.colormasks import SolidFillColorMask

logger = logging.getLogger(__name__)

DRAWERS = {
    "square": SquareModuleDrawer,
    "dots": GappedSquareModuleDrawer,
    "circle": CircleModuleDrawer,
    "rounded": RoundedModuleDrawer,
}


def _rgb(value: str | None, default: tuple) -> tuple:
    try:
        return ImageColor.getrgb(value) if value else default
    except ValueError:
        return default


def render_qr_png(data: str, color_dark: str = "#000000", color_light: str = "#FFFFFF",
                  style: str = "square", logo_data: str | None = None, size: int = 512) -> bytes:
    """
    Render ``data`` as a styled QR code PNG.

    ``logo_data`` is an optional base64 image (data URL prefix allowed)
    pasted over the centre; a bad logo is logged and skipped.
    """
    fill_rgb = _rgb(color_dark, (0, 0, 0))
    back_rgb = _rgb(color_light, (255, 255, 255))
    drawer = DRAWERS.get((style or "square").lower(), SquareModuleDrawer)()

    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    qr_img = qr.make_image(
        image_factory=StyledPilImage,
        module_drawer=drawer,
        color_mask=SolidFillColorMask(back_color=back_rgb, front_color=fill_rgb)
    ).convert("RGB")

    if logo_data:
        try:
            if "," in logo_data:
                logo_data = logo_data.split(",", 1)[1]
            logo_img = Image.open(io.BytesIO(base64.b64decode(logo_data)))

            qr_w, qr_h = qr_img.size
            logo_size = int(qr_w * 0.25)
            logo_img = logo_img.resize((logo_size, logo_size))
            pos = ((qr_w - logo_size) // 2, (qr_h - logo_size) // 2)
            if logo_img.mode == "RGBA":
                qr_img.paste(logo_img, pos, logo_img)
            else:
                qr_img.paste(logo_img, pos)
        except Exception as e:
            logger.warning(f"Logo embedding failed: {e}")

    qr_img = qr_img.resize((size, size))

    buffer = io.BytesIO()
    qr_img.save(buffer, format="PNG")
    return buffer.getvalue()


def png_data_url(png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")
