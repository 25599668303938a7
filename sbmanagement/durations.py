"""
xsd:duration conversion for Service Bus time spans.

Author: Ayodele Oladeji
Date: 2025-12-05
"""

import re
from datetime import timedelta

# Unbounded sentinel; never serialized for optional durations.
MAX_DURATION = timedelta.max

# Wire literal the service uses for its own maximum time span.
MAX_DURATION_LITERAL = "P10675199DT2H48M5.4775807S"
MAX_DURATION_MICROSECONDS = 922337203685477580

_MICROSECONDS_PER_SECOND = 1_000_000
_SECONDS_PER_DAY = 86400

_DURATION_PATTERN = re.compile(
    r'(?P<sign>-)?P'
    r'(?:(?P<years>\d+)Y)?'
    r'(?:(?P<months>\d+)M)?'
    r'(?:(?P<days>\d+)D)?'
    r'(?:T'
    r'(?:(?P<hours>\d+)H)?'
    r'(?:(?P<minutes>\d+)M)?'
    r'(?:(?P<seconds>\d+)(?:\.(?P<fraction>\d+))?S)?'
    r')?',
    re.ASCII,
)


def parse_duration(duration_str: str) -> timedelta:
    """
    Parse an xsd:duration string to a timedelta.
    
    Supports formats like:
    - PT60S (60 seconds)
    - PT1M (60 seconds)
    - PT1H30M (5400 seconds)
    - P14D (1209600 seconds)
    - -PT5S (negative five seconds)
    
    Years count as 365 days and months as 30 days. The service maximum
    literal maps to MAX_DURATION; longer durations are rejected.
    
    Args:
        duration_str: xsd:duration string
        
    Returns:
        Parsed timedelta
        
    Raises:
        ValueError: If the text is not a valid duration or exceeds the
            service maximum
    """
    match = _DURATION_PATTERN.fullmatch(duration_str)
    if match is None:
        raise ValueError(f"Invalid ISO 8601 duration: {duration_str!r}")
    
    parts = match.groupdict()
    components = ('years', 'months', 'days', 'hours', 'minutes', 'seconds')
    if not any(parts[name] is not None for name in components):
        raise ValueError(f"Duration has no components: {duration_str!r}")
    if duration_str.endswith('T'):
        raise ValueError(f"Duration time designator without components: {duration_str!r}")
    
    def number(name: str) -> int:
        value = parts[name]
        return int(value) if value is not None else 0
    
    days = number('years') * 365 + number('months') * 30 + number('days')
    seconds = (
        days * _SECONDS_PER_DAY
        + number('hours') * 3600
        + number('minutes') * 60
        + number('seconds')
    )
    fraction = parts['fraction'] or ""
    micros = int(fraction[:6].ljust(6, "0")) if fraction else 0
    total = seconds * _MICROSECONDS_PER_SECOND + micros
    
    if total > MAX_DURATION_MICROSECONDS:
        raise ValueError(f"Duration out of range: {duration_str!r}")
    if parts['sign']:
        return -timedelta(microseconds=total)
    if total == MAX_DURATION_MICROSECONDS:
        return MAX_DURATION
    return timedelta(microseconds=total)


def format_duration(value: timedelta) -> str:
    """
    Format a timedelta as the canonical xsd:duration the service emits.
    
    Examples: PT0S, PT1M, P14D, P1DT2H3M4.5S, -PT30S.
    """
    if value == MAX_DURATION:
        return MAX_DURATION_LITERAL
    
    total = value // timedelta(microseconds=1)
    sign = "-" if total < 0 else ""
    total = abs(total)
    
    days, remainder = divmod(total, _SECONDS_PER_DAY * _MICROSECONDS_PER_SECOND)
    hours, remainder = divmod(remainder, 3600 * _MICROSECONDS_PER_SECOND)
    minutes, remainder = divmod(remainder, 60 * _MICROSECONDS_PER_SECOND)
    seconds, micros = divmod(remainder, _MICROSECONDS_PER_SECOND)
    
    date_part = f"{days}D" if days else ""
    time_part = ""
    if hours:
        time_part += f"{hours}H"
    if minutes:
        time_part += f"{minutes}M"
    if seconds or micros:
        time_part += str(seconds)
        if micros:
            time_part += "." + f"{micros:06d}".rstrip("0")
        time_part += "S"
    
    if not date_part and not time_part:
        return "PT0S"
    return f"{sign}P{date_part}" + (f"T{time_part}" if time_part else "")
