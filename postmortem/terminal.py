"""
The terminal sink: where rendered reports go.

Output is written through a rich Console on stderr. Strings are printed
verbatim (no markup, no highlighting) because fault messages routinely contain
square brackets; rich Text objects keep their own styles.
"""
from rich.console import Console


class Terminal:

    def __init__(self, console=None, /):
        self.console = console if console is not None else Console(stderr=True, highlight=False)

    def output(self, renderable, /):
        if isinstance(renderable, (list, tuple)):
            renderable = "\n".join(map(str, renderable))
        self.console.print(renderable, markup=False, highlight=False, soft_wrap=True)


__all__ = ("Terminal",)
