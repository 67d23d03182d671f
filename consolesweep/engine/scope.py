"""Heuristic block-scope tracking without a parser.

Answers "is line N inside a catch handler / function / conditional?" by
scanning backward a bounded number of lines for the nearest opener and then
summing brace balance forward to the target. Results are approximate on
deeply nested or brace-free code; the lookback bound keeps the cost per
occurrence constant.
"""

import re

from consolesweep.utils.constants import CATCH_LOOKBACK, CONDITIONAL_LOOKBACK, FUNCTION_LOOKBACK

from .patterns import indent_width, mask_non_code

# `catch (e) {`, `catch {` and promise `.catch(`
CATCH_OPENER = re.compile(r"\bcatch\s*[({]")

FUNCTION_OPENER = re.compile(
    r"\bfunction\b"
    r"|=>"
    r"|^\s*(?:async\s+)?(?:static\s+)?(?:get\s+|set\s+)?[A-Za-z_$][\w$]*\s*\([^)]*\)\s*\{"
)

CONDITIONAL_OPENER = re.compile(r"^\s*(?:\}\s*)?(?:if|else|while|for|switch)\b")


def _previous_code_line(line_index: int, lines: list[str]) -> int | None:
    for k in range(line_index - 1, -1, -1):
        if lines[k].strip():
            return k
    return None


def is_within_block(
    line_index: int,
    lines: list[str],
    opener: re.Pattern,
    max_lookback: int = 15,
    column: int | None = None,
) -> bool:
    """Check whether ``lines[line_index]`` sits inside a block started by ``opener``.

    Args:
        line_index: 0-based index of the target line
        lines: Every line of the file
        opener: Regex identifying the block's opening line
        max_lookback: How many lines above the target to search for the opener
        column: Position of the call on the target line; only text before it
            counts, so one-line blocks like ``catch (e) { log(e) }`` resolve

    Returns:
        True when the nearest opener's block is still open at the target.
    """
    if not 0 <= line_index < len(lines):
        return False

    floor = max(0, line_index - max_lookback)
    for k in range(line_index, floor - 1, -1):
        if k == line_index and column is not None:
            match = opener.search(lines[k], 0, column)
        else:
            match = opener.search(lines[k])
        if match:
            return _open_at_target(k, match.start(), line_index, lines, column)
    return False


def _open_at_target(
    opener_index: int,
    opener_start: int,
    target_index: int,
    lines: list[str],
    column: int | None,
) -> bool:
    balance = 0
    saw_open = False

    for j in range(opener_index, target_index + 1):
        text = lines[j]
        start = opener_start if j == opener_index else 0
        end = column if (j == target_index and column is not None) else len(text)
        opens, closes = _brace_delta(text, start, end)

        if opens:
            saw_open = True
        balance += opens - closes

        if saw_open and balance <= 0 and j < target_index:
            return False

    if saw_open:
        return balance > 0

    # No braces at all: brace-free arrow body, or the call on the opener line
    if opener_index == target_index:
        return True
    previous = _previous_code_line(target_index, lines)
    return previous == opener_index and indent_width(lines[target_index]) > indent_width(lines[opener_index])


def _brace_delta(text: str, start: int, end: int) -> tuple[int, int]:
    # Mask the whole line before slicing so string state is right
    code = mask_non_code(text)[start:end]
    return code.count("{"), code.count("}")


def is_in_catch_block(
    line_index: int, lines: list[str], column: int | None = None, max_lookback: int = CATCH_LOOKBACK
) -> bool:
    return is_within_block(line_index, lines, CATCH_OPENER, max_lookback, column)


def is_in_function(
    line_index: int, lines: list[str], column: int | None = None, max_lookback: int = FUNCTION_LOOKBACK
) -> bool:
    return is_within_block(line_index, lines, FUNCTION_OPENER, max_lookback, column)


def is_in_conditional(
    line_index: int, lines: list[str], column: int | None = None, max_lookback: int = CONDITIONAL_LOOKBACK
) -> bool:
    return is_within_block(line_index, lines, CONDITIONAL_OPENER, max_lookback, column)
