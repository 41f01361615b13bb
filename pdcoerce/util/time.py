"""Time zone normalization for the ``datetime`` kind."""
# pylint: disable=redefined-outer-name
from __future__ import annotations
import datetime
import re
import zoneinfo

import pytz
import tzlocal


# ISO-style offsets, e.g. ``+05:30``, ``-0800`` or ``UTC+01:00``
OFFSET = re.compile(
    r"^(?:UTC)?(?P<sign>[+-])(?P<hours>\d{2}):?(?P<minutes>\d{2})$"
)


def tz(
    tz: str | datetime.tzinfo | None
) -> str | datetime.tzinfo | None:
    """Convert a time zone specifier into a canonical form.

    Parameters
    ----------
    tz : str | datetime.tzinfo | None
        An IANA string, an ISO offset string (``"+05:30"``), the special
        string ``"local"``, a :class:`tzinfo <python:datetime.tzinfo>` object
        (including ``pytz``, ``zoneinfo`` and fixed-offset zones), or
        ``None`` for naive datetimes.

    Returns
    -------
    str | datetime.tzinfo | None
        The zone's canonical IANA name, or ``None`` if the input was
        ``None``.  Fixed offsets map to ``"UTC"`` or an ``Etc/GMT`` zone when
        they are a whole number of hours, and to a cached
        :func:`pytz.FixedOffset` otherwise.

    Raises
    ------
    ValueError
        If the string does not name a known time zone.
    TypeError
        If the input is not a time zone specifier, or is a tzinfo object
        with neither an IANA name nor a fixed offset.

    Notes
    -----
    ``Etc/GMT`` names invert the usual sign: ``+05:00`` is ``Etc/GMT-5``.

    Examples
    --------
    .. doctest::

        >>> tz(datetime.timezone(datetime.timedelta(hours=5)))
        'Etc/GMT-5'
        >>> tz("-08:00")
        'Etc/GMT+8'
        >>> tz("+05:30")
        pytz.FixedOffset(330)
    """
    if tz is None:
        return None

    # local specifier
    if isinstance(tz, str) and tz.lower() == "local":
        return tzlocal.get_localzone_name()

    # UTC is spelled many ways
    if tz is pytz.utc or tz is datetime.timezone.utc:
        return "UTC"
    if isinstance(tz, str) and tz.upper() == "UTC":
        return "UTC"

    # tzinfo objects
    if isinstance(tz, pytz.BaseTzInfo):
        return tz.zone
    if isinstance(tz, zoneinfo.ZoneInfo):
        return tz.key
    if isinstance(tz, datetime.tzinfo):
        name = str(tz)
        if name in pytz.all_timezones_set:
            return name
        offset = tz.utcoffset(None)
        if offset is None:
            raise TypeError(f"time zone has no IANA name: {repr(tz)}")
        return fixed_offset(offset)

    if not isinstance(tz, str):
        raise TypeError(f"invalid time zone: {repr(tz)}")

    # offset string
    match = OFFSET.match(tz)
    if match:
        minutes = 60 * int(match.group("hours")) + int(match.group("minutes"))
        if match.group("sign") == "-":
            minutes = -minutes
        return fixed_offset(datetime.timedelta(minutes=minutes))

    # IANA string
    try:
        return pytz.timezone(tz).zone
    except pytz.UnknownTimeZoneError as err:
        raise ValueError(f"unknown time zone: {repr(tz)}") from err


def fixed_offset(offset: datetime.timedelta) -> str | datetime.tzinfo:
    """Normalize a fixed UTC offset."""
    minutes, remainder = divmod(offset, datetime.timedelta(minutes=1))
    if remainder:
        raise TypeError(f"offset is not a whole number of minutes: {offset}")

    if minutes == 0:
        return "UTC"
    hours, partial = divmod(minutes, 60)
    if not partial and -12 <= hours <= 14:
        return f"Etc/GMT{-hours:+d}"
    return pytz.FixedOffset(minutes)


def tz_name(tz: str | datetime.tzinfo) -> str:
    """Render a normalized time zone in a form that :func:`tz` accepts."""
    if isinstance(tz, str):
        return tz
    minutes = int(tz.utcoffset(None).total_seconds() // 60)
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"
