"""
Service calendrier (jours fériés, week-ends) / Calendar service (public holidays, weekends).
S'appuie sur la librairie `holidays` (calendriers publics par pays ISO 3166-1).
Fonctions pures : aucun état hormis le cache des calendriers.
"""

import calendar
from datetime import date, timedelta
from functools import lru_cache

import holidays

from presto.exceptions import ValidationError


@lru_cache(maxsize=256)
def _holiday_table(country_code: str, year: int, language: str | None) -> holidays.HolidayBase:
    """Calendrier des jours fériés publics d'un pays pour une année / Public holidays of a country for a year."""
    try:
        return holidays.country_holidays(country_code, years=year, language=language)
    except NotImplementedError:
        raise ValidationError(f"Unsupported holiday country: {country_code}") from None


@lru_cache(maxsize=1)
def supported_countries() -> list[str]:
    """Codes pays supportés / Supported country codes (ISO 3166-1 alpha-2)."""
    return sorted(holidays.list_supported_countries())


def is_supported_country(country_code: str) -> bool:
    return country_code in supported_countries()


def is_weekend(day: date) -> bool:
    """Samedi ou dimanche / Saturday or Sunday."""
    return day.weekday() >= 5


def holiday_name(day: date, country_code: str, language: str | None = None) -> str | None:
    """Nom du jour férié ou None / Public holiday name, or None."""
    return _holiday_table(country_code.upper(), day.year, language).get(day)


def is_holiday(day: date, country_code: str) -> bool:
    return holiday_name(day, country_code) is not None


def days_in_month(year: int, month: int) -> int:
    """Nombre de jours du mois (calendrier grégorien proleptique) / Days in month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    return calendar.monthrange(year, month)[1]


def month_dates(year: int, month: int) -> list[date]:
    """Toutes les dates du mois, dans l'ordre / All dates of the month, in order."""
    first = date(year, month, 1)
    return [first + timedelta(days=i) for i in range(days_in_month(year, month))]


def working_days_in_month(year: int, month: int, country_code: str) -> int:
    """Jours ni week-end ni fériés / Days that are neither weekend nor holiday."""
    return sum(
        1 for d in month_dates(year, month)
        if not is_weekend(d) and not is_holiday(d, country_code)
    )


def working_days_in_year(year: int, country_code: str) -> int:
    """Jours ouvrés de l'année, indépendant des rapports / Working days in the year, report-independent."""
    return sum(working_days_in_month(year, month, country_code) for month in range(1, 13))
