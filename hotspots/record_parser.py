from __future__ import annotations

from typing import Optional, Tuple

# trip log schema: idx, pickup_zone, _, pickup_datetime, _, _
N_FIELDS = 6
ZONE_FIELD = 1
DATETIME_FIELD = 3

# same set as C isspace() in the default locale
WHITESPACE = " \t\n\r\v\f"
DIGITS = frozenset("0123456789")


def trim_field(s: str) -> str:
    """
    Strip ASCII whitespace from both ends.

    Returns `s` itself when there is nothing to strip, so trimming an
    already-trimmed field is a no-op.
    """
    if not s or (s[0] not in WHITESPACE and s[-1] not in WHITESPACE):
        return s
    return s.strip(WHITESPACE)


def split_csv_line(line: str) -> list[str]:
    """
    Split on commas that are not inside double quotes.

    Quotes only toggle the in-quotes state and are dropped from the output.
    There is no escape for a literal quote ("" is just two toggles).
    """
    fields = []
    buf = []
    in_quotes = False
    for ch in line:
        if ch == '"':
            in_quotes = not in_quotes
            continue
        if ch == "," and not in_quotes:
            fields.append("".join(buf))
            buf = []
        else:
            buf.append(ch)
    fields.append("".join(buf))
    return fields


def parse_hour(dt: str) -> int:
    """
    Hour of day from the two characters right after the first space
    ("2023-01-15 14:30:00" -> 14). Returns -1 if that slot is not 00..23.
    """
    sp = dt.find(" ")
    if sp < 0 or sp + 3 > len(dt):
        return -1

    c0, c1 = dt[sp + 1], dt[sp + 2]
    if c0 not in DIGITS or c1 not in DIGITS:
        return -1

    hour = int(c0) * 10 + int(c1)
    if hour > 23:
        return -1
    return hour


def parse_record(line: str) -> Optional[Tuple[str, int]]:
    """(zone, hour) for a well-formed trip row, None for anything else."""
    fields = split_csv_line(line)
    if len(fields) != N_FIELDS:
        return None

    zone = trim_field(fields[ZONE_FIELD])
    dt = trim_field(fields[DATETIME_FIELD])
    if not zone or not dt:
        return None

    hour = parse_hour(dt)
    if hour < 0:
        return None
    return zone, hour
