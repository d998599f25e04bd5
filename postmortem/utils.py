"""
Small text helpers shared by the presenter.

- flatten(text): squeeze a multi-line message onto one line (newlines become
  spaces, runs of spaces collapse, ends are stripped).
- first_line(text): the summary line of a message; by convention every catalog
  message starts with a one-line synopsis.
"""
import re


def flatten(text, /):
    """
    >>> flatten("bad\\n  thing\\n")
    'bad thing'
    """
    if not isinstance(text, str):
        raise TypeError("flatten() argument must be a string")
    return re.sub(r" {2,}", " ", text.replace("\n", " ")).strip()


def first_line(text, /):
    if not isinstance(text, str):
        raise TypeError("first_line() argument must be a string")
    return text.split("\n", 1)[0]


__all__ = (
    "flatten",
    "first_line",
)
