"""Public holiday presets, keyed by country name.

Each preset computes the holidays a country observes in a given year.
Where a country moves holidays that fall on a weekend, the preset returns
the *observed* date and tags the name with ``(Observed)``:

* United States: Saturday -> preceding Friday, Sunday -> following Monday.
* United Kingdom, Canada, Australia: weekend -> next free weekday, so
  Christmas and Boxing Day never collapse onto the same substitute day.

Continental presets (Germany, France, Belgium) do not shift anything.
"""

from __future__ import annotations

import datetime

from oooff.ledger import Holiday

DEFAULT_YEAR = 2026

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _nth_weekday(year: int, month: int, weekday: int, n: int) -> datetime.date:
    """Return the *n*-th occurrence of *weekday* in *month* of *year*.

    *weekday* follows ``datetime`` convention: 0 = Monday … 6 = Sunday.
    *n* is 1-based (1 = first, 2 = second, …).
    """
    first = datetime.date(year, month, 1)
    delta = (weekday - first.weekday()) % 7
    return first + datetime.timedelta(days=delta, weeks=n - 1)


def _last_weekday(year: int, month: int, weekday: int) -> datetime.date:
    """Return the last occurrence of *weekday* in *month* of *year*."""
    if month == 12:
        last = datetime.date(year, 12, 31)
    else:
        last = datetime.date(year, month + 1, 1) - datetime.timedelta(days=1)
    return _weekday_on_or_before(last, weekday)


def _weekday_on_or_before(d: datetime.date, weekday: int) -> datetime.date:
    return d - datetime.timedelta(days=(d.weekday() - weekday) % 7)


def _easter(year: int) -> datetime.date:
    """Western (Gregorian) Easter Sunday, anonymous Gregorian algorithm."""
    a = year % 19
    b, c = divmod(year, 100)
    d, e = divmod(b, 4)
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i, k = divmod(c, 4)
    l = (32 + 2 * e + 2 * i - h - k) % 7  # noqa: E741
    m = (a + 11 * h + 22 * l) // 451
    month, day = divmod(h + l - 7 * m + 114, 31)
    return datetime.date(year, month, day + 1)


def _easter_offset(year: int, days: int) -> datetime.date:
    return _easter(year) + datetime.timedelta(days=days)


def _observed(d: datetime.date, name: str) -> Holiday:
    """US rule: shift a weekend holiday to Friday (Sat) or Monday (Sun)."""
    if d.weekday() == 5:
        return d - datetime.timedelta(days=1), f"{name} (Observed)"
    if d.weekday() == 6:
        return d + datetime.timedelta(days=1), f"{name} (Observed)"
    return d, name


def _substitute(holidays: list[Holiday]) -> list[Holiday]:
    """Commonwealth rule: move weekend holidays to the next free weekday.

    Holidays already on a weekday keep their date and are placed first, so
    a weekend holiday never takes a day another holiday already owns.
    """
    fixed = [(d, n) for d, n in holidays if d.weekday() < 5]
    taken = {d for d, _n in fixed}
    moved: list[Holiday] = []
    for d, name in sorted(holidays):
        if d.weekday() < 5:
            continue
        sub = d
        while sub.weekday() >= 5 or sub in taken:
            sub += datetime.timedelta(days=1)
        taken.add(sub)
        moved.append((sub, f"{name} (Observed)"))
    return fixed + moved


# ---------------------------------------------------------------------------
# Country presets
# ---------------------------------------------------------------------------


def us_holidays(year: int) -> list[Holiday]:
    """US federal holidays (observed) for *year*."""
    return sorted(
        [
            _observed(datetime.date(year, 1, 1), "New Year's Day"),
            (_nth_weekday(year, 1, 0, 3), "Martin Luther King Jr. Day"),
            (_nth_weekday(year, 2, 0, 3), "Presidents' Day"),
            (_last_weekday(year, 5, 0), "Memorial Day"),
            _observed(datetime.date(year, 7, 4), "Independence Day"),
            (_nth_weekday(year, 9, 0, 1), "Labor Day"),
            (_nth_weekday(year, 10, 0, 2), "Columbus Day"),
            _observed(datetime.date(year, 11, 11), "Veterans Day"),
            (_nth_weekday(year, 11, 3, 4), "Thanksgiving Day"),
            _observed(datetime.date(year, 12, 25), "Christmas Day"),
        ]
    )


def uk_holidays(year: int) -> list[Holiday]:
    """England & Wales bank holidays for *year*."""
    return sorted(
        _substitute(
            [
                (datetime.date(year, 1, 1), "New Year's Day"),
                (datetime.date(year, 12, 25), "Christmas Day"),
                (datetime.date(year, 12, 26), "Boxing Day"),
            ]
        )
        + [
            (_easter_offset(year, -2), "Good Friday"),
            (_easter_offset(year, 1), "Easter Monday"),
            (_nth_weekday(year, 5, 0, 1), "Early May Bank Holiday"),
            (_last_weekday(year, 5, 0), "Spring Bank Holiday"),
            (_last_weekday(year, 8, 0), "Summer Bank Holiday"),
        ]
    )


def canada_holidays(year: int) -> list[Holiday]:
    """Canadian statutory holidays for *year*."""
    return sorted(
        _substitute(
            [
                (datetime.date(year, 1, 1), "New Year's Day"),
                (datetime.date(year, 7, 1), "Canada Day"),
                (datetime.date(year, 11, 11), "Remembrance Day"),
                (datetime.date(year, 12, 25), "Christmas Day"),
                (datetime.date(year, 12, 26), "Boxing Day"),
            ]
        )
        + [
            (_easter_offset(year, -2), "Good Friday"),
            (_weekday_on_or_before(datetime.date(year, 5, 24), 0), "Victoria Day"),
            (_nth_weekday(year, 8, 0, 1), "Civic Holiday"),
            (_nth_weekday(year, 9, 0, 1), "Labour Day"),
            (_nth_weekday(year, 10, 0, 2), "Thanksgiving"),
        ]
    )


def australia_holidays(year: int) -> list[Holiday]:
    """Australian national public holidays for *year*."""
    return sorted(
        _substitute(
            [
                (datetime.date(year, 1, 1), "New Year's Day"),
                (datetime.date(year, 1, 26), "Australia Day"),
                (datetime.date(year, 12, 25), "Christmas Day"),
                (datetime.date(year, 12, 26), "Boxing Day"),
            ]
        )
        + [
            (_easter_offset(year, -2), "Good Friday"),
            (_easter_offset(year, -1), "Easter Saturday"),
            (_easter_offset(year, 1), "Easter Monday"),
            (datetime.date(year, 4, 25), "ANZAC Day"),
            (_nth_weekday(year, 6, 0, 2), "King's Birthday"),
        ]
    )


def germany_holidays(year: int) -> list[Holiday]:
    """German nationwide public holidays for *year*."""
    return sorted(
        [
            (datetime.date(year, 1, 1), "New Year's Day"),
            (_easter_offset(year, -2), "Good Friday"),
            (_easter_offset(year, 1), "Easter Monday"),
            (datetime.date(year, 5, 1), "Labour Day"),
            (_easter_offset(year, 39), "Ascension Day"),
            (_easter_offset(year, 50), "Whit Monday"),
            (datetime.date(year, 10, 3), "German Unity Day"),
            (datetime.date(year, 12, 25), "Christmas Day"),
            (datetime.date(year, 12, 26), "Second Day of Christmas"),
        ]
    )


def france_holidays(year: int) -> list[Holiday]:
    """French public holidays for *year* (metropolitan, outside Alsace-Moselle)."""
    return sorted(
        [
            (datetime.date(year, 1, 1), "New Year's Day"),
            (_easter_offset(year, 1), "Easter Monday"),
            (datetime.date(year, 5, 1), "Labour Day"),
            (datetime.date(year, 5, 8), "Victory in Europe Day"),
            (_easter_offset(year, 39), "Ascension Day"),
            (_easter_offset(year, 50), "Whit Monday"),
            (datetime.date(year, 7, 14), "Bastille Day"),
            (datetime.date(year, 8, 15), "Assumption Day"),
            (datetime.date(year, 11, 1), "All Saints' Day"),
            (datetime.date(year, 11, 11), "Armistice Day"),
            (datetime.date(year, 12, 25), "Christmas Day"),
        ]
    )


def belgium_holidays(year: int) -> list[Holiday]:
    """Belgian public holidays for *year*."""
    return sorted(
        [
            (datetime.date(year, 1, 1), "New Year's Day"),
            (_easter_offset(year, 1), "Easter Monday"),
            (datetime.date(year, 5, 1), "Labour Day"),
            (_easter_offset(year, 39), "Ascension Day"),
            (_easter_offset(year, 50), "Whit Monday"),
            (datetime.date(year, 7, 21), "Belgian National Day"),
            (datetime.date(year, 8, 15), "Assumption of Mary"),
            (datetime.date(year, 11, 1), "All Saints' Day"),
            (datetime.date(year, 11, 11), "Armistice Day"),
            (datetime.date(year, 12, 25), "Christmas Day"),
        ]
    )


PRESETS: dict[str, str] = {
    "United States": "United States federal holidays",
    "United Kingdom": "England & Wales bank holidays",
    "Canada": "Canadian statutory holidays",
    "Australia": "Australian national public holidays",
    "Germany": "German nationwide public holidays",
    "France": "French public holidays",
    "Belgium": "Belgian public holidays",
}

_PRESET_FNS = {
    "United States": us_holidays,
    "United Kingdom": uk_holidays,
    "Canada": canada_holidays,
    "Australia": australia_holidays,
    "Germany": germany_holidays,
    "France": france_holidays,
    "Belgium": belgium_holidays,
}

COUNTRY_CODES: dict[str, str] = {
    "us": "United States",
    "usa": "United States",
    "uk": "United Kingdom",
    "gb": "United Kingdom",
    "ca": "Canada",
    "au": "Australia",
    "de": "Germany",
    "fr": "France",
    "be": "Belgium",
}


def resolve_country(name: str) -> str | None:
    """Map a country name or short code to its preset name.

    Matching is case-insensitive.  Returns ``None`` when nothing matches.
    """
    key = name.strip().lower()
    if key in COUNTRY_CODES:
        return COUNTRY_CODES[key]
    for country in PRESETS:
        if country.lower() == key:
            return country
    return None


def get_preset(country: str, year: int = DEFAULT_YEAR) -> list[Holiday]:
    """Return ``(date, name)`` pairs for *country* in *year*.

    Raises ``KeyError`` if the country is not supported.
    """
    resolved = resolve_country(country)
    if resolved is None:
        supported = ", ".join(sorted(PRESETS))
        msg = f"Unknown country {country!r}. Supported: {supported}"
        raise KeyError(msg)
    return _PRESET_FNS[resolved](year)


def get_holidays(country: str, year: int = DEFAULT_YEAR) -> list[Holiday]:
    """Like :func:`get_preset`, but an unknown country has no holidays."""
    try:
        return get_preset(country, year)
    except KeyError:
        return []
