"""Pillow renderers for radar charts and PDF reports."""

from __future__ import annotations

import math
import re
from io import BytesIO
from itertools import groupby
from urllib.parse import quote

from PIL import Image, ImageDraw, ImageFont

from cupping_compass.i18n import Translator, identity
from cupping_compass.reporting import LineItem, RadarSeries

SCALE_MIN = 6.0
SCALE_MAX = 10.0
GRID_LEVELS = (7, 8, 9, 10)

PAGE_SIZE = (1240, 1754)  # A4 at 150 dpi
PAGE_MARGIN = 90
PDF_RESOLUTION = 150.0

THEMES = {
    "light": {
        "background": (255, 255, 255),
        "grid": (229, 231, 235),
        "text": (75, 85, 99),
        "muted": (156, 163, 175),
        "fill": (139, 69, 19, 90),
        "stroke": (90, 40, 10),
        "point": (255, 0, 0),
        "accent": (74, 44, 42),
    },
    "dark": {
        "background": (24, 24, 27),
        "grid": (63, 63, 70),
        "text": (228, 228, 231),
        "muted": (161, 161, 170),
        "fill": (217, 160, 102, 90),
        "stroke": (245, 200, 150),
        "point": (248, 113, 113),
        "accent": (217, 160, 102),
    },
}


def _font(size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=size)


def _palette(theme: str) -> dict[str, tuple[int, ...]]:
    return THEMES.get(theme, THEMES["light"])


def _axis_point(center: float, radius: float, index: int, count: int) -> tuple[float, float]:
    angle = 2 * math.pi * index / count - math.pi / 2
    return center + radius * math.cos(angle), center + radius * math.sin(angle)


def _value_radius(value: float, radius: float) -> float:
    scaled = (max(SCALE_MIN, min(SCALE_MAX, value)) - SCALE_MIN) / (SCALE_MAX - SCALE_MIN)
    return scaled * radius


def draw_radar(
    series: RadarSeries,
    translate: Translator = identity,
    size: int = 600,
    theme: str = "light",
) -> Image.Image:
    """Draw a radar chart on the 6-10 cupping scale and return the image."""
    colors = _palette(theme)
    image = Image.new("RGBA", (size, size), colors["background"] + (255,))
    overlay = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    center = size / 2
    radius = size * 0.33
    points = series.points()
    count = len(points)
    label_font = _font(max(10, size // 28))
    level_font = _font(max(8, size // 40))

    for level in GRID_LEVELS:
        ring_radius = _value_radius(level, radius)
        ring = [_axis_point(center, ring_radius, i, count) for i in range(count)]
        draw.polygon(ring, outline=colors["grid"])
        x, y = _axis_point(center, ring_radius, 0, count)
        draw.text((x + 4, y - 4), str(level), fill=colors["muted"], font=level_font, anchor="lb")

    for i, (name, _) in enumerate(points):
        end = _axis_point(center, radius, i, count)
        draw.line([(center, center), end], fill=colors["grid"], width=max(1, size // 300))
        lx, ly = _axis_point(center, radius * 1.15, i, count)
        draw.text((lx, ly), translate(name), fill=colors["text"], font=label_font, anchor="mm")

    polygon = [_axis_point(center, _value_radius(value, radius), i, count) for i, (_, value) in enumerate(points)]
    ImageDraw.Draw(overlay).polygon(polygon, fill=colors["fill"])
    image = Image.alpha_composite(image, overlay)
    draw = ImageDraw.Draw(image)
    draw.line(polygon + polygon[:1], fill=colors["stroke"], width=max(2, size // 150))
    dot = max(3, size // 120)
    for x, y in polygon:
        draw.ellipse((x - dot, y - dot, x + dot, y + dot), fill=colors["point"])
    return image.convert("RGB")


def render_radar_png(
    series: RadarSeries,
    translate: Translator = identity,
    size: int = 600,
    theme: str = "light",
) -> bytes:
    with BytesIO() as buffer:
        draw_radar(series, translate, size, theme).save(buffer, format="PNG")
        return buffer.getvalue()


class _PageWriter:
    def __init__(self, translate: Translator):
        self.translate = translate
        self.pages: list[Image.Image] = []
        self.fonts = {
            "title": _font(44),
            "subtitle": _font(34),
            "heading": _font(28),
            "body": _font(22),
        }
        self.new_page()

    def new_page(self) -> None:
        self.image = Image.new("RGB", PAGE_SIZE, THEMES["light"]["background"])
        self.draw = ImageDraw.Draw(self.image)
        self.y = PAGE_MARGIN
        self.pages.append(self.image)

    def _ensure_space(self, height: int) -> None:
        if self.y + height > PAGE_SIZE[1] - PAGE_MARGIN:
            self.new_page()

    def text_line(self, text: str, font_key: str, *, center: bool = False, gap: int = 12) -> None:
        font = self.fonts[font_key]
        left, top, right, bottom = self.draw.textbbox((0, 0), text, font=font)
        self._ensure_space(bottom - top + gap)
        x = (PAGE_SIZE[0] - (right - left)) / 2 if center else PAGE_MARGIN
        self.draw.text((x, self.y), text, fill=THEMES["light"]["text"], font=font)
        self.y += bottom - top + gap

    def table_row(self, columns: list[str], *, header: bool = False) -> None:
        font = self.fonts["heading" if header else "body"]
        row_height = 44 if header else 38
        self._ensure_space(row_height)
        width = (PAGE_SIZE[0] - 2 * PAGE_MARGIN) / max(1, len(columns))
        colors = THEMES["light"]
        box = (PAGE_MARGIN, self.y, PAGE_SIZE[0] - PAGE_MARGIN, self.y + row_height)
        if header:
            self.draw.rectangle(box, fill=colors["accent"])
        else:
            self.draw.rectangle(box, outline=colors["grid"])
        for index, value in enumerate(columns):
            x = PAGE_MARGIN + index * width + 10
            fill = colors["background"] if header else colors["text"]
            self.draw.text((x, self.y + 8), value, fill=fill, font=font)
        self.y += row_height

    def charts(self, items: list[LineItem]) -> None:
        chart_size = int((PAGE_SIZE[0] - 2 * PAGE_MARGIN) / max(3, len(items)))
        label_height = 40
        self._ensure_space(chart_size + label_height)
        for index, item in enumerate(items):
            x = PAGE_MARGIN + index * chart_size
            label = item.label
            left, _, right, _ = self.draw.textbbox((0, 0), label, font=self.fonts["body"])
            self.draw.text(
                (x + (chart_size - (right - left)) / 2, self.y),
                label,
                fill=THEMES["light"]["text"],
                font=self.fonts["body"],
            )
            chart = draw_radar(item.chart, self.translate, chart_size)
            self.image.paste(chart, (int(x), int(self.y + label_height)))
        self.y += chart_size + label_height


def render_pdf(line_items: list[LineItem], translate: Translator = identity) -> bytes:
    """Draw line items onto A4 pages and return the PDF bytes.

    Items are grouped by their page number; a page that overflows continues
    on an extra sheet.
    """
    writer: _PageWriter | None = None
    for _, page_items in groupby(sorted(line_items, key=lambda item: item.page), key=lambda item: item.page):
        if writer is None:
            writer = _PageWriter(translate)
        else:
            writer.new_page()
        pending_charts: list[LineItem] = []
        for item in page_items:
            if item.kind == "chart":
                pending_charts.append(item)
                continue
            if pending_charts:
                writer.charts(pending_charts)
                pending_charts = []
            _draw_item(writer, item)
        if pending_charts:
            writer.charts(pending_charts)

    if writer is None:
        writer = _PageWriter(translate)

    with BytesIO() as buffer:
        first, *rest = writer.pages
        first.save(buffer, format="PDF", save_all=True, append_images=rest, resolution=PDF_RESOLUTION)
        return buffer.getvalue()


def _draw_item(writer: _PageWriter, item: LineItem) -> None:
    if item.kind == "title":
        writer.text_line(item.label, "title", center=True, gap=30)
    elif item.kind == "subtitle":
        text = f"{item.label} - {writer.translate('score')}: {item.value}" if item.value else item.label
        writer.text_line(text, "subtitle", center=True, gap=30)
    elif item.kind == "heading":
        text = f"{item.label}: {item.value}" if item.value else item.label
        writer.y += 16
        writer.text_line(text, "heading", gap=16)
    elif item.kind == "table_header":
        writer.table_row(item.columns, header=True)
    elif item.kind == "table_row":
        writer.table_row(item.columns or [item.label, item.value])
    else:
        writer.text_line(f"{item.label}: {item.value}", "body")


def pdf_filename(coffee_name: str) -> str:
    """Report file name; quotes, path separators and control characters are dropped."""
    cleaned = re.sub(r'["\\/\x00-\x1f\x7f]', "", coffee_name).strip()
    return re.sub(r"\s+", "_", cleaned) + "_Evaluation.pdf"


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name."""
    fallback = filename.encode("ascii", "ignore").decode("ascii")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"
