"""Генератор картинок-графиков для статистики."""
import io
import logging
from typing import Optional

from PIL import Image, ImageDraw, ImageFont

from src.services.progress_engine import to_date

logger = logging.getLogger(__name__)

WIDTH = 700
HEIGHT = 360
PADDING_LEFT = 60
PADDING_RIGHT = 20
PADDING_TOP = 50
PADDING_BOTTOM = 45

COLOR_TEXT = "#333333"
COLOR_GRID = "#e0e0e0"
COLOR_LINE = "#9c27b0"
COLOR_BAR = "#ba68c8"
COLOR_BORDER = "#9c27b0"


def _load_fonts() -> tuple:
    try:
        font_title = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf", 16)
        font_label = ImageFont.truetype("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf", 12)
    except OSError:
        font_title = ImageFont.load_default()
        font_label = font_title
    return font_title, font_label


def _to_png(img: Image.Image) -> bytes:
    img_bytes = io.BytesIO()
    img.save(img_bytes, format="PNG")
    img_bytes.seek(0)
    return img_bytes.getvalue()


def _draw_frame(draw: ImageDraw.ImageDraw, title: str, font_title) -> None:
    draw.text((PADDING_LEFT, 15), title, font=font_title, fill=COLOR_TEXT)
    draw.rectangle([(0, 0), (WIDTH - 1, HEIGHT - 1)], outline=COLOR_BORDER, width=2)


def _draw_y_axis(draw, low: float, high: float, font_label, steps: int = 4) -> None:
    """Горизонтальная сетка с подписями значений."""
    plot_height = HEIGHT - PADDING_TOP - PADDING_BOTTOM
    for i in range(steps + 1):
        value = low + (high - low) * i / steps
        y = HEIGHT - PADDING_BOTTOM - plot_height * i / steps
        draw.line([(PADDING_LEFT, y), (WIDTH - PADDING_RIGHT, y)], fill=COLOR_GRID, width=1)
        draw.text((8, y - 7), f"{value:.1f}", font=font_label, fill=COLOR_TEXT)


def generate_weight_chart(records: list, title: str = "Вес") -> Optional[bytes]:
    """Линейный график веса по датам.

    Args:
        records: записи в хронологическом порядке
        title: заголовок над графиком

    Returns:
        PNG в байтах или None, если рисовать нечего
    """
    points = []
    for record in records:
        day = to_date(record.date)
        if day is not None and record.weight:
            points.append((day, float(record.weight)))
    if not points:
        return None

    try:
        img = Image.new("RGB", (WIDTH, HEIGHT), color="white")
        draw = ImageDraw.Draw(img)
        font_title, font_label = _load_fonts()
        _draw_frame(draw, title, font_title)

        weights = [weight for _, weight in points]
        # Запас сверху и снизу, чтобы линия не липла к краям
        low = min(weights) - 0.5
        high = max(weights) + 0.5
        _draw_y_axis(draw, low, high, font_label)

        first_day = points[0][0]
        span = max((points[-1][0] - first_day).days, 1)
        plot_width = WIDTH - PADDING_LEFT - PADDING_RIGHT
        plot_height = HEIGHT - PADDING_TOP - PADDING_BOTTOM

        coords = []
        for day, weight in points:
            x = PADDING_LEFT + plot_width * (day - first_day).days / span
            y = HEIGHT - PADDING_BOTTOM - plot_height * (weight - low) / (high - low)
            coords.append((x, y))

        if len(coords) > 1:
            draw.line(coords, fill=COLOR_LINE, width=3)
        for x, y in coords:
            draw.ellipse([(x - 4, y - 4), (x + 4, y + 4)], fill=COLOR_LINE)

        # Подписи первой и последней даты
        bottom = HEIGHT - PADDING_BOTTOM + 10
        draw.text((PADDING_LEFT, bottom), first_day.strftime("%d.%m"), font=font_label, fill=COLOR_TEXT)
        if len(points) > 1:
            last_label = points[-1][0].strftime("%d.%m")
            draw.text((WIDTH - PADDING_RIGHT - 40, bottom), last_label, font=font_label, fill=COLOR_TEXT)

        return _to_png(img)

    except Exception as e:
        logger.error(f"Ошибка генерации графика веса: {e}")
        return None


def generate_weekday_chart(distribution: list[dict], title: str = "Средний вес по дням недели") -> Optional[bytes]:
    """Столбчатая диаграмма среднего веса по дням недели (Вс ... Сб)."""
    filled = [bucket["average"] for bucket in distribution if bucket["count"]]
    if not filled:
        return None

    try:
        img = Image.new("RGB", (WIDTH, HEIGHT), color="white")
        draw = ImageDraw.Draw(img)
        font_title, font_label = _load_fonts()
        _draw_frame(draw, title, font_title)

        low = min(filled) - 1
        high = max(filled) + 1
        _draw_y_axis(draw, low, high, font_label)

        plot_width = WIDTH - PADDING_LEFT - PADDING_RIGHT
        plot_height = HEIGHT - PADDING_TOP - PADDING_BOTTOM
        slot = plot_width / len(distribution)
        base_y = HEIGHT - PADDING_BOTTOM

        for i, bucket in enumerate(distribution):
            x0 = PADDING_LEFT + slot * i + slot * 0.2
            x1 = PADDING_LEFT + slot * (i + 1) - slot * 0.2
            if bucket["count"]:
                top = base_y - plot_height * (bucket["average"] - low) / (high - low)
                draw.rectangle([(x0, top), (x1, base_y)], fill=COLOR_BAR)
            draw.text((x0 + 5, base_y + 10), bucket["name"], font=font_label, fill=COLOR_TEXT)

        return _to_png(img)

    except Exception as e:
        logger.error(f"Ошибка генерации диаграммы: {e}")
        return None
