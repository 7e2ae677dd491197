"""
csv_codec.py
Comma-separated text encode/decode used for export and bulk import.

Decoding is lenient: an unterminated quote runs to the end of its line
instead of raising, ragged rows are padded with empty strings, and every
field is trimmed after unquoting (quoted leading/trailing spaces are lost).
"""

from __future__ import annotations

from typing import Iterable, Sequence

DELIMITER = ","
QUOTE = '"'
_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n", "\r")


def escape_field(value) -> str:
    if value is None:
        return ""
    text = str(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def encode(headers: Sequence[str], rows: Iterable[Sequence]) -> str:
    """Header row plus one row per record, rows joined by a bare newline."""
    lines = [DELIMITER.join(escape_field(h) for h in headers)]
    for row in rows:
        lines.append(DELIMITER.join(escape_field(v) for v in row))
    return "\n".join(lines)


def parse_line(line: str) -> list[str]:
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]
        if ch == QUOTE:
            if in_quotes and i + 1 < n and line[i + 1] == QUOTE:
                current.append(QUOTE)
                i += 2
                continue
            in_quotes = not in_quotes
        elif ch == DELIMITER and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(ch)
        i += 1

    # Last field is emitted even if a quote was never closed
    fields.append("".join(current).strip())
    return fields


def split_records(text: str) -> list[str]:
    """
    Split text into records on CRLF/LF, keeping line breaks that sit inside
    quoted fields. If a quote is still open at the end of the input, the text
    from that record on is split on plain line breaks, so the stray quote only
    affects its own line. Blank records are dropped.
    """
    records: list[str] = []
    start = 0
    in_quotes = False

    for i, ch in enumerate(text):
        if ch == QUOTE:
            in_quotes = not in_quotes
        elif ch == "\n" and not in_quotes:
            records.append(text[start:i])
            start = i + 1

    tail = text[start:]
    if in_quotes:
        records.extend(tail.split("\n"))
    else:
        records.append(tail)

    out = []
    for rec in records:
        if rec.endswith("\r"):
            rec = rec[:-1]
        if rec.strip():
            out.append(rec)
    return out


def decode(text: str) -> list[dict[str, str]]:
    """
    Parse CSV text into a list of {header: value} dicts.
    Duplicate header names keep the right-most value.
    """
    records = split_records(text or "")
    if not records:
        return []

    headers = parse_line(records[0])
    rows: list[dict[str, str]] = []
    for rec in records[1:]:
        fields = parse_line(rec)
        if not any(f != "" for f in fields):
            continue
        row: dict[str, str] = {}
        for idx, name in enumerate(headers):
            row[name] = fields[idx] if idx < len(fields) else ""
        rows.append(row)
    return rows
