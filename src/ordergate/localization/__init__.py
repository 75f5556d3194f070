from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from ordergate.config import default_locale
from ordergate.delivery.models import ZoneDescription
from ordergate.hours.evaluator import NextOpening

PACKAGE_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=8)
def _load_locale(locale: str) -> dict[str, Any]:
    path = PACKAGE_DIR / locale / "messages.json"
    if not path.exists():
        return {}
    with path.open(encoding="utf-8") as fp:
        return json.load(fp)


def gettext(key: str, locale: str | None = None, **kwargs: Any) -> str:
    template: Any = _load_locale(locale or default_locale())
    for part in key.split("."):
        if isinstance(template, dict):
            template = template.get(part)
        else:
            template = None
            break
    if template is None:
        template = key
    try:
        return str(template).format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return str(template)


def weekday_label(index: int, locale: str | None = None) -> str:
    return gettext(f"weekday.{index}", locale)


def format_next_opening(
    opening: NextOpening | None,
    locale: str | None = None,
    *,
    ordering: bool = False,
) -> str:
    if opening is None:
        return gettext("status.no_opening", locale)
    key = "status.ordering_opens_at" if ordering else "status.opens_at"
    return gettext(
        key,
        locale,
        weekday=weekday_label(opening.weekday_index, locale),
        time=opening.time,
    )


def _km(value: float | None) -> str:
    if value is None:
        return ""
    return f"{value:g}"


def format_zone(description: ZoneDescription, locale: str | None = None) -> str:
    return gettext(
        f"zone.{description.kind}",
        locale,
        lower=_km(description.lower_km),
        upper=_km(description.upper_km),
    )


def format_money(amount: float) -> str:
    return f"{amount:.2f}"
