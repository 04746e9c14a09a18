"""Parsing of delimiter-separated git output into field tuples.

Git output can end early or contain lines that do not match the requested
format (a truncated buffer, an unexpected warning). Each caller names the
TruncationRule that applies to its record type instead of relying on the
shape of a loop:

- STOP: the first malformed line ends the well-formed data; it and
  everything after it are discarded.
- SKIP: malformed lines are discarded individually and parsing continues.

Either way the parser never raises; the number of discarded lines is
reported in ParseResult.skipped.
"""

from enum import StrEnum

from ._models import ParseResult
from ._runner import remove_trailing_blank_lines, split_lines

type Fields = tuple[str, ...]


class TruncationRule(StrEnum):
    STOP = "stop"
    SKIP = "skip"


def output_lines(text: str) -> list[str]:
    """Split output into lines, discarding the empty line after the last terminator."""
    lines = split_lines(text)
    if lines and lines[-1] == "":
        _ = lines.pop()
    return lines


def parse_records(
    text: str,
    separator: str,
    field_count: int,
    *,
    rule: TruncationRule = TruncationRule.STOP,
) -> ParseResult[Fields]:
    """Split each line of `text` into exactly `field_count` fields.

    Args:
        text: Tool output, one record per line.
        separator: Field separator.
        field_count: Number of fields a well-formed line splits into.
        rule: What to do with a line that splits into a different count.

    Returns:
        The well-formed records in output order and the discarded line count.
    """
    lines = output_lines(text)
    records: list[Fields] = []
    for index, line in enumerate(lines):
        fields = line.split(separator)
        if len(fields) == field_count:
            records.append(tuple(fields))
        elif rule is TruncationRule.STOP:
            return ParseResult(records=tuple(records), skipped=len(lines) - index)
    return ParseResult(records=tuple(records), skipped=len(lines) - len(records))


def parse_body_record(text: str, separator: str, structured_count: int) -> Fields | None:
    """Parse a single record whose last field is a multi-line body.

    Everything after the last structured field up to the end of the output,
    minus trailing blank lines, becomes the body, joined with "\\n". A
    separator occurring inside the body is kept as text.

    Args:
        text: Tool output holding one record.
        separator: Field separator.
        structured_count: Number of fields preceding the body.

    Returns:
        `structured_count` fields followed by the body, or None if the output
        does not contain all structured fields.
    """
    fields = text.split(separator)
    if len(fields) <= structured_count:
        return None
    body_lines = split_lines(separator.join(fields[structured_count:]))
    body = "\n".join(remove_trailing_blank_lines(body_lines))
    return (*fields[:structured_count], body)


def split_parents(value: str) -> tuple[str, ...]:
    """Split a space-joined parent hash list. An empty value means no parents."""
    return tuple(value.split(" ")) if value else ()


def parse_int(value: str, default: int = 0) -> int:
    try:
        return int(value)
    except ValueError:
        return default
