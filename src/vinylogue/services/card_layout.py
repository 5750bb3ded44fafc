"""
Card layout: positions every element of an album card without drawing.

Coordinates are canvas pixels from the top-left corner. Text positions are
left-baseline points unless the anchor says otherwise (Pillow anchor codes).
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from ..core.config import CARD_CONFIG, COLORS
from ..models.records import AlbumRecord
from ..utils.text_layout import TextMeasurer, truncate_text, wrap_text

Box = Tuple[int, int, int, int]
Color = Tuple[int, int, int, int]


@dataclass(frozen=True)
class TextItem:
    """A single line of text to draw."""
    text: str
    x: float
    y: float
    font: str
    color: Color
    anchor: str = "ls"


@dataclass(frozen=True)
class TrackRow:
    """Number, name and duration of one track list row."""
    number: TextItem
    name: TextItem
    duration: TextItem


@dataclass(frozen=True)
class CardLayout:
    """Everything the renderer needs to draw a card."""
    width: int
    height: int
    panel: Box
    panel_radius: int
    art_box: Optional[Box]
    art_radius: int
    shadow_blur: int
    shadow_offset_y: int
    content_x: int
    content_width: int
    title_lines: Tuple[TextItem, ...]
    artist: TextItem
    release: TextItem
    track_rows: Tuple[TrackRow, ...]
    logo_box: Box
    play_label: TextItem
    watermark: TextItem

    @property
    def text_items(self) -> Tuple[TextItem, ...]:
        """All text in draw order."""
        items = list(self.title_lines) + [self.artist, self.release]
        for row in self.track_rows:
            items.extend([row.number, row.name, row.duration])
        items.extend([self.play_label, self.watermark])
        return tuple(items)


def release_line(record: AlbumRecord) -> str:
    """'<year> • <n> tracks', without the year when the date is unusable."""
    tracks = f"{record.track_count} tracks"
    year = record.release_year
    return f"{year} • {tracks}" if year is not None else tracks


def build_card_layout(
    record: AlbumRecord,
    measurer: TextMeasurer,
    has_artwork: bool = True,
    config: Optional[dict] = None
) -> CardLayout:
    """
    Lay out an album card.

    The artwork region only affects whether the art box is set; text
    positions are identical with or without artwork.

    Args:
        record: Album to lay out
        measurer: Width oracle for the fonts named in the layout
        has_artwork: Whether artwork will be drawn
        config: Geometry overrides, defaults to CARD_CONFIG
    """
    cfg = config or CARD_CONFIG
    width, height, padding = cfg["WIDTH"], cfg["HEIGHT"], cfg["PADDING"]
    art_size = cfg["ART_SIZE"]

    panel = (padding, padding, width - padding, height - padding)
    art_origin = padding * 2
    art_box = (art_origin, art_origin, art_origin + art_size, art_origin + art_size) if has_artwork else None

    content_x = padding * 2 + art_size + padding * 2
    content_width = width - content_x - padding * 3
    content_y = padding * 2

    # Title
    line_height = cfg["TITLE_LINE_HEIGHT"]
    wrapped = wrap_text(measurer, record.title, "title", content_width)
    title_lines = tuple(
        TextItem(line, content_x, content_y + line_height + index * line_height, "title", COLORS["TEXT"])
        for index, line in enumerate(wrapped)
    )

    # Artist, with more air than the font's own line height
    content_y += len(wrapped) * line_height + cfg["ARTIST_GAP"]
    artist = TextItem(
        truncate_text(measurer, record.artist_display, "artist", content_width, cfg["ELLIPSIS"]),
        content_x, content_y, "artist", COLORS["PRIMARY"]
    )

    content_y += cfg["SECTION_GAP"]
    release = TextItem(release_line(record), content_x, content_y, "release", COLORS["TEXT_SECONDARY"])

    # Track list
    content_y += cfg["SECTION_GAP"]
    name_width = content_width - cfg["DURATION_COLUMN"]
    rows = []
    for index, track in enumerate(record.tracks[:cfg["MAX_TRACKS"]]):
        baseline = content_y + index * cfg["TRACK_ROW_HEIGHT"] + cfg["TRACK_BASELINE"]
        rows.append(TrackRow(
            number=TextItem(f"{track.track_number:02d}", content_x, baseline,
                            "track_number", COLORS["TEXT_SECONDARY"]),
            name=TextItem(truncate_text(measurer, track.name, "track_name", name_width, cfg["ELLIPSIS"]),
                          content_x + cfg["TRACK_NAME_OFFSET"], baseline, "track_name", COLORS["TEXT"]),
            duration=TextItem(track.duration_display, content_x + content_width, baseline,
                              "duration", COLORS["TEXT_SECONDARY"], anchor="rs"),
        ))

    # Footer
    bottom = height - padding * 2
    logo_size = cfg["LOGO_SIZE"]
    logo_box = (content_x, bottom - 32, content_x + logo_size, bottom - 32 + logo_size)
    play_label = TextItem(cfg["PLAY_LABEL"], content_x + 36, bottom - 16, "play_label", COLORS["PRIMARY"])

    watermark_text = cfg["WATERMARK"]
    watermark_x = width - padding * 2 - measurer.measure_width(watermark_text, "watermark")
    watermark = TextItem(watermark_text, watermark_x, bottom - 16, "watermark", COLORS["TEXT_TERTIARY"])

    return CardLayout(
        width=width,
        height=height,
        panel=panel,
        panel_radius=cfg["PANEL_RADIUS"],
        art_box=art_box,
        art_radius=cfg["ART_RADIUS"],
        shadow_blur=cfg["SHADOW_BLUR"],
        shadow_offset_y=cfg["SHADOW_OFFSET_Y"],
        content_x=content_x,
        content_width=content_width,
        title_lines=title_lines,
        artist=artist,
        release=release,
        track_rows=tuple(rows),
        logo_box=logo_box,
        play_label=play_label,
        watermark=watermark,
    )
