from __future__ import annotations

import re
import unicodedata

from barberbot.domain.entities.service_catalog import ALLOWED_SLOTS, SERVICES, Service

DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{2,4})$", re.ASCII)
TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$", re.ASCII)

SERVICE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^corte$"), "Corte"),
    (re.compile(r"^barba$"), "Barba"),
    (re.compile(r"^corte\s*[+&e]\s*barba$"), "Corte + Barba"),
)


def fold_text(text: str) -> str:
    """Lower-case, strip diacritics and collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", text.lower())
    without_marks = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return re.sub(r"\s+", " ", without_marks).strip()


def normalize_service(text: str) -> Service | None:
    folded = fold_text(text)
    for pattern, name in SERVICE_PATTERNS:
        if pattern.match(folded):
            return SERVICES[name]
    return None


def normalize_date(text: str) -> str | None:
    """Canonicalize D/M/Y or D-M-Y into DD/MM/YYYY. Syntax only, no calendar checks."""
    cleaned = text.replace("-", "/").strip()
    match = DATE_PATTERN.match(cleaned)
    if not match:
        return None
    day, month, year = match.groups()
    if len(year) == 2:
        year = "20" + year
    return f"{day.zfill(2)}/{month.zfill(2)}/{year}"


def normalize_time(text: str) -> str | None:
    match = TIME_PATTERN.match(text.strip())
    if not match:
        return None
    hour, minute = match.groups()
    normalized = f"{hour.zfill(2)}:{minute}"
    if normalized not in ALLOWED_SLOTS:
        return None
    return normalized
