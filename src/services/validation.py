"""Разбор и проверка пользовательского ввода.

Все функции бросают ValueError с текстом, который можно сразу
показать пользователю.
"""
import re
from datetime import date, datetime
from typing import Optional

MAX_WEIGHT = 300.0

DATE_FORMATS = ("%Y-%m-%d", "%d.%m.%Y")

UNIT_PATTERN = r"(кг|kg|lb|фунт\w*)"


def parse_weight(text: str) -> float:
    """Вес из текста: "70.5", "70,5" или "70.5 кг"."""
    cleaned = re.sub(rf"\s*{UNIT_PATTERN}\s*$", "", text.strip().lower())
    try:
        weight = float(cleaned.replace(",", "."))
    except ValueError:
        raise ValueError("Введи вес числом, например: 70.5")

    validate_weight(weight)
    return weight


def validate_weight(weight: float) -> None:
    """Проверка диапазона 0 < вес <= 300."""
    # NaN не проходит ни одно сравнение
    if not (0 < weight <= MAX_WEIGHT):
        raise ValueError(f"Вес должен быть больше 0 и не больше {MAX_WEIGHT:g}")


def parse_date(text: str) -> date:
    """Дата в формате ГГГГ-ММ-ДД или ДД.ММ.ГГГГ."""
    text = text.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValueError("Дата должна быть в формате ГГГГ-ММ-ДД или ДД.ММ.ГГГГ")


def parse_weight_entry(text: str, today: date) -> tuple[float, date]:
    """Строка "вес [единица] [дата]". Без даты — сегодня.

    Примеры: "70.5", "70,5 2025-03-10", "70.5 кг 10.03.2025".
    """
    parts = text.split()
    # "70.5 кг ..." — единица относится к весу, а не к дате
    if len(parts) > 1 and re.fullmatch(UNIT_PATTERN, parts[1].lower()):
        parts = [f"{parts[0]} {parts[1]}"] + parts[2:]
    if not parts:
        raise ValueError("Введи вес числом, например: 70.5")

    weight = parse_weight(parts[0])
    if len(parts) == 1:
        return weight, today
    if len(parts) > 2:
        raise ValueError("Формат: вес [дата], например: 70.5 2025-03-10")

    record_date = parse_date(parts[1])
    if record_date > today:
        raise ValueError("Нельзя записать вес на будущую дату")
    return weight, record_date


def parse_exercise(text: str) -> Optional[dict]:
    """Тренировка "тип минуты [калории]". "-" — без тренировки.

    Тип может состоять из нескольких слов: "силовая тренировка 45 300".
    """
    text = text.strip()
    if text in ("-", ""):
        return None

    match = re.match(r"^(?P<type>.+?)\s+(?P<minutes>-?\d+)(?:\s+(?P<calories>-?\d+))?$", text)
    if not match:
        raise ValueError("Формат: тип минуты [калории], например: бег 30 250")

    duration = int(match.group("minutes"))
    calories = int(match.group("calories")) if match.group("calories") else None
    validate_exercise(duration, calories)

    return {
        "type": match.group("type").strip(),
        "duration_minutes": duration,
        "calories": calories,
    }


def validate_exercise(duration_minutes: int, calories: Optional[int] = None) -> None:
    """Длительность и калории не могут быть отрицательными."""
    if duration_minutes < 0:
        raise ValueError("Длительность тренировки не может быть отрицательной")
    if calories is not None and calories < 0:
        raise ValueError("Калории не могут быть отрицательными")


def parse_note(text: str) -> Optional[str]:
    """Заметка. "-" — без заметки."""
    text = text.strip()
    return None if text in ("-", "") else text


def parse_optional_weight(text: str) -> Optional[float]:
    """Вес или "0", если значение не задано."""
    if text.strip() == "0":
        return None
    return parse_weight(text)


def validate_goal_dates(start_date: date, target_date: date) -> None:
    """Срок цели должен быть позже даты начала."""
    if target_date <= start_date:
        raise ValueError("Дата цели должна быть позже даты начала")
