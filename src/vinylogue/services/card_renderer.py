"""
Album card renderer.
Draws a CardLayout onto a transparent canvas with Pillow and encodes it as PNG.
"""

import logging
from io import BytesIO
from typing import Dict, Optional

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from ..core.config import CARD_CONFIG, COLORS, ERROR_MESSAGES
from ..core.exceptions import RenderError
from ..models.records import AlbumRecord
from .card_layout import CardLayout, build_card_layout
from .cover_art_fetcher import CoverArtFetcher

logger = logging.getLogger(__name__)


def load_fonts(config: Optional[dict] = None) -> Dict[str, ImageFont.FreeTypeFont]:
    """
    Load one font per text role.

    Uses VINYLOGUE_FONT_PATH / VINYLOGUE_BOLD_FONT_PATH when configured and
    Pillow's bundled font otherwise.
    """
    cfg = config or CARD_CONFIG
    fonts = {}
    for role, size in cfg["FONT_SIZES"].items():
        path = cfg["FONT_PATH"]
        if role == "title" and cfg["BOLD_FONT_PATH"]:
            path = cfg["BOLD_FONT_PATH"]
        if path:
            fonts[role] = ImageFont.truetype(path, size)
        else:
            fonts[role] = ImageFont.load_default(size=size)
    return fonts


class PillowTextMeasurer:
    """TextMeasurer backed by ImageDraw.textlength."""

    def __init__(self, draw: ImageDraw.ImageDraw, fonts: Dict[str, ImageFont.FreeTypeFont]):
        self.draw = draw
        self.fonts = fonts

    def measure_width(self, text: str, font: str) -> float:
        return self.draw.textlength(text, font=self.fonts[font])


def square_center_crop(img: Image.Image) -> Image.Image:
    if img.width == img.height:
        return img
    side = min(img.width, img.height)
    left = (img.width - side) // 2
    top = (img.height - side) // 2
    return img.crop((left, top, left + side, top + side))


class CardRenderer:
    """Renders album records as 1200x630 PNG cards."""

    def __init__(
        self,
        cover_art_fetcher: Optional[CoverArtFetcher] = None,
        fonts: Optional[Dict[str, ImageFont.FreeTypeFont]] = None,
    ):
        self.cover_art_fetcher = cover_art_fetcher or CoverArtFetcher()
        self._fonts = fonts

    @property
    def fonts(self) -> Dict[str, ImageFont.FreeTypeFont]:
        if self._fonts is None:
            self._fonts = load_fonts()
        return self._fonts

    def render(self, record: AlbumRecord) -> bytes:
        """
        Render a card for an album.

        Artwork is fetched once before layout; if it cannot be fetched the
        artwork region is left out and the rest of the card is unchanged.

        Raises:
            RenderError: If any measuring, drawing or encoding step fails
        """
        artwork = self.cover_art_fetcher.fetch_image(record.cover_image_url)
        if artwork is None and record.cover_image_url:
            logger.info(f"Rendering {record.title!r} without artwork")

        try:
            canvas = Image.new("RGBA", (CARD_CONFIG["WIDTH"], CARD_CONFIG["HEIGHT"]), (0, 0, 0, 0))
            measurer = PillowTextMeasurer(ImageDraw.Draw(canvas), self.fonts)
            layout = build_card_layout(record, measurer, has_artwork=artwork is not None)

            self._draw_panel(canvas, layout)
            if artwork is not None:
                canvas = self._draw_artwork(canvas, artwork, layout)
            self._draw_text(canvas, layout)
            self._draw_logo(canvas, layout)

            buffer = BytesIO()
            canvas.save(buffer, format="PNG")
            return buffer.getvalue()
        except Exception as e:
            raise RenderError(f"{ERROR_MESSAGES['RENDER_FAILED']} {e}") from e

    def _draw_panel(self, canvas: Image.Image, layout: CardLayout):
        x0, y0, x1, y1 = layout.panel
        ImageDraw.Draw(canvas).rounded_rectangle(
            (x0, y0, x1 - 1, y1 - 1), radius=layout.panel_radius, fill=COLORS["CARD"]
        )

    def _draw_artwork(self, canvas: Image.Image, artwork: Image.Image, layout: CardLayout) -> Image.Image:
        """Composite the drop shadow, then the rounded artwork on top."""
        x0, y0, x1, y1 = layout.art_box
        size = (x1 - x0, y1 - y0)

        shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        offset = layout.shadow_offset_y
        ImageDraw.Draw(shadow).rounded_rectangle(
            (x0, y0 + offset, x1 - 1, y1 - 1 + offset), radius=layout.art_radius, fill=COLORS["SHADOW"]
        )
        # Blur is given as a radius; GaussianBlur takes sigma = radius / 2
        shadow = shadow.filter(ImageFilter.GaussianBlur(layout.shadow_blur / 2))
        canvas = Image.alpha_composite(canvas, shadow)

        art = square_center_crop(artwork).resize(size, Image.Resampling.LANCZOS)
        mask = Image.new("L", size, 0)
        ImageDraw.Draw(mask).rounded_rectangle(
            (0, 0, size[0] - 1, size[1] - 1), radius=layout.art_radius, fill=255
        )
        canvas.paste(art, (x0, y0), mask)
        return canvas

    def _draw_text(self, canvas: Image.Image, layout: CardLayout):
        draw = ImageDraw.Draw(canvas)
        for item in layout.text_items:
            draw.text((item.x, item.y), item.text, font=self.fonts[item.font], fill=item.color, anchor=item.anchor)

    def _draw_logo(self, canvas: Image.Image, layout: CardLayout):
        """Brand mark: green disc with a ring and a dot."""
        draw = ImageDraw.Draw(canvas)
        x0, y0, x1, y1 = layout.logo_box
        cx, cy = (x0 + x1) / 2, (y0 + y1) / 2
        scale = (x1 - x0) / 24

        def disc(radius: float, fill):
            r = radius * scale
            draw.ellipse((cx - r, cy - r, cx + r, cy + r), fill=fill)

        disc(12, COLORS["PRIMARY"])
        disc(8, COLORS["LOGO_MARK"])
        disc(6, COLORS["PRIMARY"])
        disc(4, COLORS["LOGO_MARK"])
