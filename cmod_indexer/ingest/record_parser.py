"""Quote-aware parser for one delimited data line.

Quoting follows the usual CSV convention with permissive handling of
badly-formed input:

1. A field that starts with ``"`` is quoted; it may contain the delimiter
2. Inside a quoted field ``""`` stands for one literal quote
3. Any other quote that does not close the field is kept as text
4. Quotes inside an unquoted field are kept as text

The only line that cannot be recovered is one that ends inside a quoted
field. Whitespace is never trimmed.
"""

from cmod_indexer.config import DEFAULT_DELIMITER, QUOTE_CHAR
from cmod_indexer.errors import ParseError


def parse_line(line: str, delimiter: str = DEFAULT_DELIMITER, offset: int = 0) -> list[str]:
    """Split a line (terminator already stripped) into its fields.

    ``offset`` is the line's data offset, reported in ParseError.
    """
    fields = []
    current = []
    in_quotes = False
    at_field_start = True
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]

        if in_quotes:
            if ch == QUOTE_CHAR:
                nxt = line[i + 1] if i + 1 < n else None
                if nxt == QUOTE_CHAR:
                    current.append(QUOTE_CHAR)
                    i += 2
                    continue
                if nxt is None or nxt == delimiter:
                    in_quotes = False
                    i += 1
                    continue
            # a stray quote falls through and is kept as text
            current.append(ch)
            i += 1
            continue

        if ch == delimiter:
            fields.append(''.join(current))
            current = []
            at_field_start = True
            i += 1
            continue

        if ch == QUOTE_CHAR and at_field_start:
            in_quotes = True
            at_field_start = False
            i += 1
            continue

        current.append(ch)
        at_field_start = False
        i += 1

    if in_quotes:
        raise ParseError(offset, line, "quoted field not terminated")

    fields.append(''.join(current))
    return fields
