"""Turning classified lines into display text"""

import click

from heatlog.classified import ClassifiedLine, Matched
from heatlog.ranking import HIGHLIGHT_STYLE, RankBucketer, Style, style_for_bucket


def apply_style(text: str, style: Style, colorize: bool) -> str:
    """Wrap text in ANSI codes for ``style``; plain text when colorize is off or the style is empty."""
    if not colorize or style.is_plain:
        return text
    return click.style(text, fg=style.fg, bold=style.bold or None)


def span_style(value: int, bucketer: RankBucketer | None, highlight: bool, bold: bool) -> Style:
    """Pick the style for a matched span.

    Highlight mode uses one fixed style; otherwise the value's rank bucket decides.
    Bold composes with either.
    """
    if highlight or bucketer is None:
        base = HIGHLIGHT_STYLE if highlight else Style()
    else:
        base = style_for_bucket(bucketer.bucket_of(value))
    return base.with_bold(bold)


def render_line(
    line: ClassifiedLine,
    bucketer: RankBucketer | None,
    highlight: bool = False,
    bold: bool = False,
    colorize: bool = True,
) -> str:
    """Render one classified line.

    Unmatched lines come back verbatim. Matched lines keep the text around
    the span untouched and style only the span itself.
    """
    if not isinstance(line, Matched):
        return line.text

    style = span_style(line.value, bucketer, highlight, bold)
    before = line.text[: line.start]
    after = line.text[line.end :]
    return before + apply_style(line.matched_text, style, colorize) + after
