r"""
Argument-line tokenizer.

split() breaks one raw argument line into tokens:
- unquoted, unescaped spaces separate tokens (runs of spaces collapse);
- a backslash makes the next character literal and is itself dropped;
- a double quote toggles quoting, inside which spaces are literal; the quote
  characters are dropped.

Empty tokens are never produced, which also means a bare "" pair vanishes.
An unterminated quote keeps the rest of the line inside the current token and a
trailing lone backslash is discarded.

    >>> split(r'--name "John Smith" --path C:\\tmp')
    ['--name', 'John Smith', '--path', 'C:\\tmp']
"""


def split(line, /):
    if not isinstance(line, str):
        raise TypeError("split() argument must be a string")

    tokens = []
    current = []
    quoted = False
    escaped = False

    for char in line:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == '"':
            quoted = not quoted
        elif char == " " and not quoted:
            if current:
                tokens.append("".join(current))
                current.clear()
        else:
            current.append(char)

    if current:
        tokens.append("".join(current))

    return tokens


__all__ = ("split",)
