from __future__ import annotations

"""Quote- and parenthesis-aware argument splitter.

Partitions a term list such as ``"a, b", SUM(A1, 2), C3`` into its top-level
arguments. Inside a double-quoted literal every character is inert; outside
one, whitespace is dropped and commas split only at depth zero.
"""

__all__ = [
    "FormulaSyntaxError",
    "split_arguments",
    "find_matching_paren",
]

QUOTE = '"'


class FormulaSyntaxError(ValueError):
    """Structurally invalid formula text (unbalanced parentheses, open quote)."""


def split_arguments(text: str) -> list[str]:
    """Split text into top-level comma-separated argument strings.

    Args:
        text: Term list without the enclosing call parentheses

    Returns:
        Argument strings with insignificant whitespace removed. An empty
        input gives an empty list; an empty slot between commas is kept as "".

    Raises:
        FormulaSyntaxError: On a closing parenthesis without a matching
            opening one, on unclosed parentheses, or on an unterminated quote.
    """
    args: list[str] = []
    current: list[str] = []
    depth = 0
    quoted = False
    for index, char in enumerate(text):
        if char == QUOTE:
            quoted = not quoted
            current.append(char)
        elif quoted:
            current.append(char)
        elif char.isspace():
            continue
        elif char == "(":
            depth += 1
            current.append(char)
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise FormulaSyntaxError(f"unexpected ')' at position {index}")
            current.append(char)
        elif char == "," and depth == 0:
            args.append("".join(current))
            current = []
        else:
            current.append(char)

    if quoted:
        raise FormulaSyntaxError("unterminated string literal")
    if depth != 0:
        raise FormulaSyntaxError(f"{depth} unclosed '('")

    last = "".join(current)
    if not args and last == "":
        return []
    args.append(last)
    return args


def find_matching_paren(text: str, open_index: int) -> int:
    """Return the index of the ')' closing the '(' at open_index.

    Raises:
        FormulaSyntaxError: If the parenthesis is never closed.
    """
    depth = 0
    quoted = False
    for index in range(open_index, len(text)):
        char = text[index]
        if char == QUOTE:
            quoted = not quoted
        elif quoted:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    raise FormulaSyntaxError(f"'(' at position {open_index} is never closed")
