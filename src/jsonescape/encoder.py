from jsonescape.helpers import split_surrogates

NAMED_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}

HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
}


def escape(text: str, ascii_only: bool = False, html_safe: bool = False) -> str:
    r"""
    Escapes text so it can be placed between the quotes of a JSON string.

    Quotes, backslashes and the control characters with a short form become
    \", \\, \b, \f, \n, \r and \t. Other control characters become lowercase
    \u00XX escapes. With `html_safe`, <, > and & are escaped as well. With
    `ascii_only`, every character above U+007F is written as a \uXXXX escape,
    using a surrogate pair for characters outside the BMP.
    """
    parts: list[str] = []
    for ch in text:
        named = NAMED_ESCAPES.get(ch)
        if named is not None:
            parts.append(named)
            continue
        if html_safe and ch in HTML_ESCAPES:
            parts.append(HTML_ESCAPES[ch])
            continue

        code_point = ord(ch)
        if code_point < 0x20:
            parts.append(_unicode_escape(code_point))
        elif ascii_only and code_point > 0x7F:
            if code_point <= 0xFFFF:
                parts.append(_unicode_escape(code_point))
            else:
                high, low = split_surrogates(code_point)
                parts.append(_unicode_escape(high) + _unicode_escape(low))
        else:
            parts.append(ch)
    return "".join(parts)


def _unicode_escape(code_unit: int) -> str:
    return f"\\u{code_unit:04x}"
