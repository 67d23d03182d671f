"""Context classification for debug-print call sites.

One ``Occurrence`` per call token. The classifier reads one line plus the
file's line array and combines the pattern matchers and scope tracker into a
single verdict:

    1. commented?            -> stop, nothing else structural applies
    2. inside a catch block?
    3. raw context flags      (ternary, chain, arrow body, expression, return)
    4. functional?            (ordered table below)
    5. sensitivity            (independent of 1-4)

Functional signals are an explicit ordered table so the precedence is
visible and each signal can be tested on its own.
"""

from collections.abc import Callable
from enum import Enum

from consolesweep.utils.constants import (
    CATCH_LOOKBACK,
    CONDITIONAL_LOOKBACK,
    DEFAULT_CALL_TOKEN,
    DEFAULT_CONTEXT_LINES,
    FUNCTION_LOOKBACK,
)
from consolesweep.utils.logging import logger

from . import patterns
from .models import ContextFlags, Occurrence
from .scope import is_in_catch_block, is_in_conditional, is_in_function
from .sensitivity import detect_sensitive_data


class ArrowBodyRule(Enum):
    """Whether a bare arrow-function body counts as functional on its own."""

    # `x => log(x)` is functional by itself
    DIRECT = "direct"
    # Arrow bodies count only when the expression matcher also fires
    EXPRESSION_ONLY = "expression-only"


FunctionalSignal = tuple[str, Callable[[ContextFlags], bool]]

FUNCTIONAL_SIGNALS: tuple[FunctionalSignal, ...] = (
    ("return-value", lambda flags: flags.is_return_value),
    ("ternary", lambda flags: flags.is_ternary),
    ("chain", lambda flags: flags.is_chain),
    ("expression", lambda flags: flags.is_expression),
)

ARROW_SIGNAL: FunctionalSignal = ("arrow-body", lambda flags: flags.is_arrow_body)


class ContextClassifier:
    """Build classified occurrences for one file at a time."""

    def __init__(
        self,
        call: str = DEFAULT_CALL_TOKEN,
        arrow_rule: ArrowBodyRule = ArrowBodyRule.DIRECT,
        context_lines: int = DEFAULT_CONTEXT_LINES,
        catch_lookback: int = CATCH_LOOKBACK,
        function_lookback: int = FUNCTION_LOOKBACK,
        conditional_lookback: int = CONDITIONAL_LOOKBACK,
    ):
        self.call = call
        self.arrow_rule = arrow_rule
        self.context_lines = context_lines
        self.catch_lookback = catch_lookback
        self.function_lookback = function_lookback
        self.conditional_lookback = conditional_lookback

    @property
    def signals(self) -> tuple[FunctionalSignal, ...]:
        if self.arrow_rule is ArrowBodyRule.DIRECT:
            return FUNCTIONAL_SIGNALS + (ARROW_SIGNAL,)
        return FUNCTIONAL_SIGNALS

    def functional_reasons(self, flags: ContextFlags) -> list[str]:
        """Names of every functional signal that fired."""
        return [name for name, predicate in self.signals if predicate(flags)]

    def is_functional(self, flags: ContextFlags) -> bool:
        return bool(self.functional_reasons(flags))

    def context_flags(self, line: str, line_index: int, lines: list[str], column: int | None = None) -> ContextFlags:
        call = self.call
        return ContextFlags(
            is_ternary=patterns.is_ternary_branch(line, call),
            is_chain=patterns.is_method_chain(line, call),
            is_arrow_body=patterns.is_arrow_function_body(line, call),
            is_expression=patterns.is_expression_target(line, call),
            is_return_value=patterns.is_return_value(line, call),
            is_in_function=is_in_function(line_index, lines, column, self.function_lookback),
            is_in_conditional=is_in_conditional(line_index, lines, column, self.conditional_lookback),
            indent_level=patterns.indent_width(line),
        )

    def window(self, line_index: int, lines: list[str]) -> tuple[int, list[str]]:
        """(1-based first line number, lines) around ``line_index``."""
        start = max(0, line_index - self.context_lines)
        end = min(len(lines), line_index + self.context_lines + 1)
        return start + 1, lines[start:end]

    def classify(
        self,
        line: str,
        line_index: int,
        lines: list[str],
        column: int | None = None,
        in_block_comment: bool = False,
    ) -> Occurrence:
        """Classify the call at ``column`` (default: the first call token).

        Args:
            line: Raw text of the line
            line_index: 0-based index of ``line`` in ``lines``
            lines: All lines of the file
            column: Offset of the call token on the line
            in_block_comment: Line starts inside a /* */ comment
        """
        if column is None:
            columns = patterns.find_call_columns(line, self.call, in_block_comment)
            column = columns[0] if columns else 0

        window_start, window = self.window(line_index, lines)
        occurrence = Occurrence(
            line_number=line_index + 1,
            column=column,
            raw_text=line,
            surrounding_window=window,
            window_start=window_start,
        )

        occurrence.is_commented = patterns.is_inside_comment(line, column, in_block_comment)
        occurrence.is_in_error_handler = is_in_catch_block(line_index, lines, column, self.catch_lookback)

        if not occurrence.is_commented:
            occurrence.context = self.context_flags(line, line_index, lines, column)
            occurrence.is_functional = self.is_functional(occurrence.context)
        else:
            occurrence.context = ContextFlags(indent_level=patterns.indent_width(line))

        occurrence.sensitivity = detect_sensitive_data(line, column, self.call)
        return occurrence

    def analyze_file(self, path: str, content: str) -> list[Occurrence]:
        """Find and classify every call site in ``content``.

        Tokens inside string literals are not call sites. Calls inside a
        multi-line /* */ comment are commented occurrences carrying the
        comment's line span.
        """
        lines = content.split("\n")
        spans = block_comment_spans(lines)
        occurrences: list[Occurrence] = []

        in_block = False
        for index, line in enumerate(lines):
            starts_in_block = in_block
            regions, in_block = patterns.scan_regions(line, starts_in_block)

            if self.call not in line:
                continue

            for column in patterns.find_call_columns(line, self.call, starts_in_block):
                occurrence = self.classify(line, index, lines, column, starts_in_block)
                occurrence.file_path = path

                region = next((r for r in regions if r.contains(column)), None)
                if region is not None and region.continued:
                    occurrence.is_commented = True
                    occurrence.is_functional = False
                    occurrence.context = ContextFlags(indent_level=patterns.indent_width(line))
                    opens_here = not (starts_in_block and region.start == 0)
                    occurrence.comment_span = _span_for(index, opens_here, spans)

                occurrences.append(occurrence)

        logger.debug("{path}: {count} occurrence(s)", path=path, count=len(occurrences))
        return occurrences


def block_comment_spans(lines: list[str]) -> list[tuple[int, int]]:
    """0-based inclusive (start, end) line spans of /* */ comments crossing a line break.

    An unterminated comment runs to the last line.
    """
    spans = []
    in_block = False
    start = 0
    for index, line in enumerate(lines):
        _, ends_in_block = patterns.scan_regions(line, in_block)
        closed_here = in_block and "*/" in line
        if closed_here:
            spans.append((start, index))
        if ends_in_block and (not in_block or closed_here):
            start = index
        in_block = ends_in_block

    if in_block:
        spans.append((start, len(lines) - 1))
    return spans


def _span_for(line_index: int, opens_here: bool, spans: list[tuple[int, int]]) -> tuple[int, int] | None:
    for start, end in spans:
        if opens_here and start == line_index:
            return start, end
        if not opens_here and start < line_index <= end:
            return start, end
    return None


def analyze_file(
    path: str,
    content: str,
    call: str = DEFAULT_CALL_TOKEN,
    arrow_rule: ArrowBodyRule = ArrowBodyRule.DIRECT,
) -> list[Occurrence]:
    """Classify every call site in ``content`` with default heuristics."""
    return ContextClassifier(call=call, arrow_rule=arrow_rule).analyze_file(path, content)
