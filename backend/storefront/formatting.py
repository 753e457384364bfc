# Overview: Display helpers for prices, dates, slugs and product descriptions (es-CO).

from __future__ import annotations

import html
import re
import unicodedata
from datetime import date, datetime

from storefront.time_utils import parse_iso_datetime

MONTHS_ES = (
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
)

_BOLD_RE = re.compile(r"\*\*([^*]+?)\*\*")
_ITALIC_RE = re.compile(r"\*([^*]+?)\*")
_PARAGRAPH_SPLIT_RE = re.compile(r"\n\s*\n")
_SLUG_INVALID_RE = re.compile(r"[^a-z0-9]+")


def format_price(amount: int | float) -> str:
    """Colombian pesos, no decimals: 125000 -> "$ 125.000"."""
    value = int(round(amount))
    digits = f"{abs(value):,}".replace(",", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}$ {digits}"


def _as_datetime(value: str | date | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    parsed = parse_iso_datetime(value)
    if parsed is None:
        raise ValueError("date value is empty")
    return parsed


def format_date(value: str | date | datetime) -> str:
    dt = _as_datetime(value)
    return f"{dt.day} de {MONTHS_ES[dt.month - 1]} de {dt.year}"


def format_datetime(value: str | date | datetime) -> str:
    dt = _as_datetime(value)
    return f"{format_date(dt)}, {dt:%H:%M}"


def generate_slug(text: str) -> str:
    """
    URL slug from free text.

    Diacritics are stripped (NFD decomposition minus combining marks) and every
    run of characters outside [a-z0-9] becomes a single hyphen.
    """
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    ascii_only = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SLUG_INVALID_RE.sub("-", ascii_only).strip("-")


def text_to_html(text: str | None) -> str:
    """
    Convert plain product copy to HTML.

    - blank lines separate <p> paragraphs
    - single newlines become <br>
    - **text** -> <strong>, *text* -> <em>
    Input is escaped before any markup is produced.
    """
    if not text:
        return ""

    formatted = html.escape(text, quote=True).replace("&#x27;", "&#039;")
    formatted = _BOLD_RE.sub(r"<strong>\1</strong>", formatted)
    formatted = _ITALIC_RE.sub(r"<em>\1</em>", formatted)

    paragraphs = []
    for para in _PARAGRAPH_SPLIT_RE.split(formatted):
        with_breaks = para.strip().replace("\n", "<br>")
        if with_breaks:
            paragraphs.append(f"<p>{with_breaks}</p>")

    return "".join(paragraphs) or formatted.replace("\n", "<br>")
