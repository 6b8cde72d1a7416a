"""C-style quoting of path names, compatible with git's quote_c_style.

Names are handled as bytes so that paths which are not valid UTF-8 survive the round
trip unchanged. A name is quoted only when it contains a control character, a double
quote, a backslash, DEL, or any byte at or above 0x80.
"""

from checkignore.exceptions import BadlyQuotedLineError

_ESCAPES = {
    0x07: b"\\a",
    0x08: b"\\b",
    0x09: b"\\t",
    0x0A: b"\\n",
    0x0B: b"\\v",
    0x0C: b"\\f",
    0x0D: b"\\r",
    0x22: b'\\"',
    0x5C: b"\\\\",
}

_UNESCAPES = {
    ord("a"): 0x07,
    ord("b"): 0x08,
    ord("t"): 0x09,
    ord("n"): 0x0A,
    ord("v"): 0x0B,
    ord("f"): 0x0C,
    ord("r"): 0x0D,
    ord('"'): 0x22,
    ord("\\"): 0x5C,
}

_OCTAL_DIGITS = b"01234567"


def _byte_needs_quoting(byte: int) -> bool:
    return byte < 0x20 or byte == 0x22 or byte == 0x5C or byte >= 0x7F


def needs_quoting(name: bytes) -> bool:
    """Tell whether a name would be wrapped in quotes by quote_c_style.

    Example:
        >>> needs_quoting(b"plain/path.txt")
        False
        >>> needs_quoting(b"with space")
        False
        >>> needs_quoting(b'say "hi"')
        True
    """
    return any(_byte_needs_quoting(byte) for byte in name)


def quote_c_style(name: bytes, force_quotes: bool = False) -> bytes:
    """Quote a name if it contains special bytes, otherwise return it unchanged.

    Args:
        name: Raw name bytes.
        force_quotes: Wrap the name in double quotes even when nothing needs escaping.
            Verbose output uses this so the path column is always delimited.

    Returns:
        Either ``name`` itself or the name wrapped in double quotes with special bytes
        escaped (``\\t``, ``\\n``, ``\\"`` ... or three-digit octal).

    Example:
        >>> quote_c_style(b"build/output.o")
        b'build/output.o'
        >>> quote_c_style(b"build/output.o", force_quotes=True)
        b'"build/output.o"'
        >>> quote_c_style(b"tab\\there")
        b'"tab\\\\there"'
        >>> quote_c_style("caf\\u00e9".encode("utf-8"))
        b'"caf\\\\303\\\\251"'
    """
    if not force_quotes and not needs_quoting(name):
        return name

    out = bytearray(b'"')
    for byte in name:
        if not _byte_needs_quoting(byte):
            out.append(byte)
        elif byte in _ESCAPES:
            out += _ESCAPES[byte]
        else:
            out += b"\\%03o" % byte
    out += b'"'
    return bytes(out)


def write_name_quoted(name: bytes, terminator: bytes) -> bytes:
    """Render a name followed by its record terminator.

    With a NUL terminator the name is emitted raw, since NUL-separated consumers can
    cope with any byte. Otherwise it is passed through quote_c_style.

    Example:
        >>> write_name_quoted(b"a\\nb", b"\\n")
        b'"a\\\\nb"\\n'
        >>> write_name_quoted(b"a\\nb", b"\\0")
        b'a\\nb\\x00'
    """
    if terminator == b"\0":
        return name + terminator
    return quote_c_style(name) + terminator


def unquote_c_style(quoted: bytes) -> bytes:
    """Undo quote_c_style on a record that starts with a double quote.

    Args:
        quoted: The record, including the opening and closing double quotes.

    Returns:
        The unquoted name bytes.

    Raises:
        BadlyQuotedLineError: If the record does not open with a quote, contains an unknown
            escape or a short octal escape, lacks the closing quote, or has anything after
            the closing quote.

    Example:
        >>> unquote_c_style(b'"quoted path"')
        b'quoted path'
        >>> unquote_c_style(b'"a\\\\tb\\\\303\\\\251"') == "a\\tb\\u00e9".encode("utf-8")
        True
    """
    if not quoted.startswith(b'"'):
        raise BadlyQuotedLineError()

    out = bytearray()
    i = 1
    end = len(quoted)
    while i < end:
        byte = quoted[i]
        if byte == 0x22:
            if i + 1 != end:
                raise BadlyQuotedLineError()
            return bytes(out)
        if byte != 0x5C:
            out.append(byte)
            i += 1
            continue

        i += 1
        if i >= end:
            break
        escape = quoted[i]
        if escape in _UNESCAPES:
            out.append(_UNESCAPES[escape])
            i += 1
        elif escape in b"0123":
            digits = quoted[i : i + 3]  # noqa: E203
            if len(digits) != 3 or any(d not in _OCTAL_DIGITS for d in digits[1:]):
                raise BadlyQuotedLineError()
            out.append(int(digits, 8))
            i += 3
        else:
            raise BadlyQuotedLineError()

    # Ran off the end without seeing the closing quote
    raise BadlyQuotedLineError()
