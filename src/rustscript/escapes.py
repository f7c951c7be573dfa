"""Backslash escape sequences shared by string and char literals."""

ESCAPE_CODES = {
    '0': '\0',
    'a': '\a',
    'b': '\b',
    't': '\t',
    'n': '\n',
    'v': '\v',
    'f': '\f',
    'r': '\r',
    'e': '\x1b',
    '\\': '\\',
    "'": "'",
    '"': '"',
}

_REVERSE_CODES = {char: code for code, char in ESCAPE_CODES.items()}

HEX_DIGITS = set('0123456789abcdefABCDEF')


def unescape(sequence: str) -> str:
    """Resolve escape sequences in raw literal text.

    Raises ValueError on a dangling backslash or an unknown escape code;
    the lexer turns that into a ParseError with a location.
    """
    result = []
    i = 0
    while i < len(sequence):
        c = sequence[i]
        if c != '\\':
            result.append(c)
            i += 1
            continue
        i += 1
        if i >= len(sequence):
            raise ValueError("Unexpected end of literal after '\\'")
        code = sequence[i]
        hex_value = sequence[i + 1:i + 5]
        if code == 'u' and len(hex_value) == 4 and set(hex_value) <= HEX_DIGITS:
            result.append(chr(int(hex_value, 16)))
            i += 5
        elif code in ESCAPE_CODES:
            result.append(ESCAPE_CODES[code])
            i += 1
        else:
            raise ValueError(f"Unknown escape sequence '\\{code}'")
    return ''.join(result)


def escape(text: str) -> str:
    return ''.join('\\' + _REVERSE_CODES[c] if c in _REVERSE_CODES else c for c in text)
