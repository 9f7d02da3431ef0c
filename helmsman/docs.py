"""
Documentation trees for help output, built from rich renderables.

The engine never lays text out itself: options, commands and definitions build
a tree out of the combinators below and hand it to render(), which lets a rich
Console do the layout.

Combinators
- vcat(*docs): stack documents vertically (rich Group); None entries are skipped.
- hsep(*docs): join Text fragments with single spaces; None/empty are skipped.
- punctuate(separator, docs): join Text fragments with `separator`.
- nest(indent, doc): indent a document by `indent` columns (rich Padding).
- columns(rows, width): two-column listing, each right cell starting at `width`
  unless its own left cell is wider.

Styling
- Palette(colorful) turns plain strings into Text, applying named styles only
  when colorful is true. Entries can be overridden by a __styles__ mapping
  defined in __main__.
"""
from collections import defaultdict

from rich.console import Group
from rich.padding import Padding
from rich.segment import Segment, SegmentLines
from rich.table import Table
from rich.text import Text


class Palette:
    """
    Named styles for help and fault output.

    Palette keys
    - description, section-label, program-name, command-name
    - option-name, metavar, value-name, help
    - error-label, error-message, warning-label, warning-message
    """

    def __init__(self, colorful=False):
        self.colorful = bool(colorful)
        self.styles = defaultdict(str, {
            # === Head sections ===
            "description": "italic #A3A3A3",
            "section-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",

            # === Grammar elements ===
            "command-name": "bold #36C5F0",
            "option-name": "bold #22C55E",
            "metavar": "bold #FFD600",
            "value-name": "bold #FFD600",
            "help": "#9CA3AF",

            # === Faults ===
            "error-label": "bold #FF4DA6",
            "error-message": "#C8C8D0",
            "warning-label": "bold #FFB400",
            "warning-message": "#D6D6DE",
        } | getattr(__import__("__main__"), "__styles__", {}))

    def __call__(self, fragment, style="", /):
        if not fragment:
            return Text("")
        if not self.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), self.styles[style])


def vcat(*docs):
    return Group(*(doc for doc in docs if doc is not None))


def hsep(*docs):
    return Text(" ").join(doc for doc in docs if doc is not None and doc.plain)


def punctuate(separator, docs, /):
    return Text(separator).join(docs)


def nest(indent, doc, /):
    return Padding(doc, (0, 0, 0, indent), expand=False)


def _row(left, right, width, /):
    grid = Table.grid(padding=(0, 2, 0, 0))
    grid.add_column(min_width=width - 2, no_wrap=True)
    grid.add_column()
    grid.add_row(left, right)
    return grid


def columns(rows, /, width=20):
    """
    Lay out (left, right) pairs so every right cell starts at column `width`.

    Each row is laid out on its own: a left cell wider than the gutter pushes
    the right cell of that row only. Right cells wrap with a hanging indent.
    """
    return vcat(*(_row(left, right, width) for left, right in rows))


def _rstrip(line, /):
    line = list(Segment.simplify(line))
    while line and not line[-1].control and not line[-1].text.rstrip():
        line.pop()
    if line and not line[-1].control:
        text, style, control = line[-1]
        line[-1] = Segment(text.rstrip(), style, control)
    return line


def render(doc, console, /):
    """
    Print a documentation tree on `console` and flush it.

    Lines are emitted without trailing blanks (rich pads indented blocks to
    their width). Flushing here guarantees the output is complete before a
    following exit.
    """
    lines = console.render_lines(doc, pad=False)
    console.print(SegmentLines(map(_rstrip, lines), new_lines=True))
    console.file.flush()


__all__ = (
    "Palette",
    "vcat",
    "hsep",
    "punctuate",
    "nest",
    "columns",
    "render",
)
