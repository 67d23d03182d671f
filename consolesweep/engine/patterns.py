"""Line-level pattern matchers for debug-print call sites.

Every matcher here answers one narrow yes/no question about a single line of
JavaScript/TypeScript and never looks at other lines. The context classifier
combines them in a fixed order (ternary before plain expression, for
example), so keep each predicate independent and side-effect free.

Structural matchers run on a masked copy of the line: string literal
contents and comments are blanked with spaces, keeping every column where it
was. A `?` inside a string or a `=` in a trailing comment must never make a
call look like part of an expression.

Templates use the ``<CALL>`` placeholder for the escaped call token so one
set of regexes serves ``console.log`` as well as any configured token.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from consolesweep.utils.constants import DEFAULT_CALL_TOKEN

QUOTES = frozenset("'\"`")

DELIMITER_PAIRS = (("(", ")"), ("{", "}"), ("[", "]"))

# ============================================================================
# REGION SCANNER
# ============================================================================


@dataclass(frozen=True)
class Region:
    """A half-open [start, end) slice of a line with one lexical kind."""

    kind: str  # "code" | "string" | "line-comment" | "block-comment"
    start: int
    end: int
    # Block comment that crosses a line boundary
    continued: bool = False

    @property
    def is_comment(self) -> bool:
        return self.kind in ("line-comment", "block-comment")

    def contains(self, index: int) -> bool:
        return self.start <= index < self.end


def _string_end(line: str, start: int) -> int:
    quote = line[start]
    i = start + 1
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1
        i += 1
    # Unterminated on this line (multi-line template literal): runs to EOL
    return len(line)


def scan_regions(line: str, in_block_comment: bool = False) -> tuple[list[Region], bool]:
    """Split a line into code, string and comment regions.

    Args:
        line: One line of source text
        in_block_comment: True when the line starts inside a /* */ comment

    Returns:
        (regions, ends_in_block_comment)
    """
    regions: list[Region] = []
    n = len(line)
    i = 0

    if in_block_comment:
        close = line.find("*/")
        if close == -1:
            return [Region("block-comment", 0, n, continued=True)], True
        regions.append(Region("block-comment", 0, close + 2, continued=True))
        i = close + 2

    code_start = i
    while i < n:
        ch = line[i]
        if ch in QUOTES:
            if code_start < i:
                regions.append(Region("code", code_start, i))
            end = _string_end(line, i)
            regions.append(Region("string", i, end))
            i = code_start = end
            continue

        if ch == "/" and i + 1 < n and line[i + 1] in "/*":
            if code_start < i:
                regions.append(Region("code", code_start, i))
            if line[i + 1] == "/":
                regions.append(Region("line-comment", i, n))
                return regions, False
            close = line.find("*/", i + 2)
            if close == -1:
                regions.append(Region("block-comment", i, n, continued=True))
                return regions, True
            regions.append(Region("block-comment", i, close + 2))
            i = code_start = close + 2
            continue

        i += 1

    if code_start < n:
        regions.append(Region("code", code_start, n))
    return regions, False


def region_at(line: str, column: int, in_block_comment: bool = False) -> Region | None:
    """Return the region containing ``column``, if any."""
    regions, _ = scan_regions(line, in_block_comment)
    for region in regions:
        if region.contains(column):
            return region
    return None


def _mask(line: str, in_block_comment: bool = False) -> tuple[str, bool]:
    regions, ends_in_block = scan_regions(line, in_block_comment)
    chars = list(line)
    for region in regions:
        if region.kind == "code":
            continue
        if region.kind == "string":
            # Keep the quotes so "x = 'a'" still reads as an assignment
            inner_start = region.start + 1
            inner_end = region.end - 1 if region.end - region.start >= 2 and line[region.end - 1] == line[region.start] else region.end
            for k in range(inner_start, inner_end):
                chars[k] = " "
        else:
            for k in range(region.start, region.end):
                chars[k] = " "
    return "".join(chars), ends_in_block


def mask_non_code(line: str, in_block_comment: bool = False) -> str:
    """Blank string contents and comments, preserving columns."""
    return _mask(line, in_block_comment)[0]


def is_inside_string(line: str, column: int, in_block_comment: bool = False) -> bool:
    region = region_at(line, column, in_block_comment)
    return region is not None and region.kind == "string"


def is_inside_comment(line: str, column: int, in_block_comment: bool = False) -> bool:
    region = region_at(line, column, in_block_comment)
    return region is not None and region.is_comment


# ============================================================================
# CALL TOKEN
# ============================================================================

_TOKEN = r"(?<![\w$])<CALL>(?![\w$])"
_QMARK = r"(?<![?.])\?(?![.?])"


@lru_cache(maxsize=128)
def compile_call_template(template: str, call: str) -> re.Pattern:
    return re.compile(template.replace("<CALL>", re.escape(call)))


def call_pattern(call: str = DEFAULT_CALL_TOKEN) -> re.Pattern:
    """Regex matching the bare call token on identifier boundaries."""
    return compile_call_template(_TOKEN, call)


def find_call_columns(
    line: str, call: str = DEFAULT_CALL_TOKEN, in_block_comment: bool = False
) -> list[int]:
    """Columns of every call token on the line that is not inside a string.

    Tokens inside comments are reported; they are commented-out call sites.
    """
    columns = []
    for match in call_pattern(call).finditer(line):
        if not is_inside_string(line, match.start(), in_block_comment):
            columns.append(match.start())
    return columns


def call_argument_span(text: str, column: int, call: str = DEFAULT_CALL_TOKEN) -> tuple[int, int] | None:
    """Find the balanced argument list of the call at ``column``.

    ``text`` should already be masked so parens inside strings do not
    count. Returns (open_paren_index, close_paren_index) or None when the
    token is not followed by ``(`` or the list does not close on this line.
    """
    i = column + len(call)
    n = len(text)
    while i < n and text[i] in " \t":
        i += 1
    if i >= n or text[i] != "(":
        return None

    depth = 0
    for j in range(i, n):
        if text[j] == "(":
            depth += 1
        elif text[j] == ")":
            depth -= 1
            if depth == 0:
                return i, j
    return None


def _code_columns(code: str, call: str) -> list[int]:
    return [m.start() for m in call_pattern(call).finditer(code)]


# ============================================================================
# MATCHERS
# ============================================================================


def is_commented(line: str, call: str = DEFAULT_CALL_TOKEN) -> bool:
    """Line is a `//` comment holding the call, or a one-line `/* call */`."""
    trimmed = line.strip()
    token = call_pattern(call)

    if trimmed.startswith("//"):
        return token.search(trimmed) is not None

    if trimmed.startswith("/*"):
        match = token.search(trimmed)
        return match is not None and "*/" in trimmed[match.end():]

    return False


def is_standalone_call(line: str, call: str = DEFAULT_CALL_TOKEN) -> bool:
    """The call is the entire statement on its line.

    Only such lines are safe to delete outright: nothing before the call,
    exactly one call token outside comments, the argument list closes on
    this line and at most a semicolon follows it.
    """
    code = mask_non_code(line)
    if len(_code_columns(code, call)) != 1:
        return False

    stripped = code.strip()
    if not stripped.startswith(call) or not stripped.endswith((";", ")")):
        return False

    start = len(code) - len(code.lstrip())
    if not call_pattern(call).match(code, start):
        return False

    span = call_argument_span(code, start, call)
    if span is None:
        return False

    rest = code[span[1] + 1:].strip()
    return rest in ("", ";")


_TERNARY_TEMPLATES = (
    _QMARK + r"\s*" + _TOKEN,  # cond ? call(...) : other
    r":\s*" + _TOKEN,  # cond ? other : call(...)
    _TOKEN + r".*" + _QMARK + r".*:",  # call(...) ? a : b
    _QMARK + r".*" + _TOKEN + r".*:",  # a ? (b ? call() : c) : d
)
_TERNARY_CONTINUATION = r"^\s*[?:]\s*" + _TOKEN


def is_ternary_branch(line: str, call: str = DEFAULT_CALL_TOKEN) -> bool:
    """Call is a branch (or condition) of a conditional expression."""
    code = mask_non_code(line)
    if not call_pattern(call).search(code):
        return False

    if compile_call_template(_TERNARY_CONTINUATION, call).search(code):
        return True

    if not (re.search(_QMARK, code) and ":" in code):
        return False

    return any(compile_call_template(t, call).search(code) for t in _TERNARY_TEMPLATES)


_CHAIN_TEMPLATES = (
    r"[\w$)\]]\s*\.\s*" + _TOKEN,  # obj.call / fn().call
    _TOKEN + r"\s*\([^)]*\)\s*\.\s*[A-Za-z_$]",  # call(...).next
    r"\.\s*(?:then|catch|finally)\s*\(\s*" + _TOKEN,  # promise.then(call)
    r"\.\s*(?:map|filter|forEach|reduce)\s*\([^;]*" + _TOKEN,  # arr.map(x => call(x))
)
_MEMBER_AFTER = re.compile(r"\s*\.\s*[A-Za-z_$]")


def is_method_chain(line: str, call: str = DEFAULT_CALL_TOKEN) -> bool:
    """Call is a segment of a dotted chain or a promise/array callback."""
    code = mask_non_code(line)
    columns = _code_columns(code, call)
    if not columns:
        return False

    if any(compile_call_template(t, call).search(code) for t in _CHAIN_TEMPLATES):
        return True

    for column in columns:
        span = call_argument_span(code, column, call)
        if span and _MEMBER_AFTER.match(code, span[1] + 1):
            return True
    return False


_ARROW_TEMPLATES = (
    r"\([^()]*\)\s*=>\s*" + _TOKEN,  # (a, b) => call(...)
    r"(?<![\w$])[A-Za-z_$][\w$]*\s*=>\s*" + _TOKEN,  # a => call(...)
    r"\.\s*(?:map|filter|forEach|reduce|find|some|every)\s*\([^)]*=>[^)]*" + _TOKEN,
)


def is_arrow_function_body(line: str, call: str = DEFAULT_CALL_TOKEN) -> bool:
    """Call is the direct (expression) body of an arrow function."""
    code = mask_non_code(line)
    return any(compile_call_template(t, call).search(code) for t in _ARROW_TEMPLATES)


_BLOCK_OPEN = re.compile(r"(?:\)|=>|\belse|\btry|\bdo|\bfinally)\s*\{")
_ASSIGNMENT = re.compile(r"[\w$\]]\s*(?:[-+*/%&|^]|\*\*|<<|>>>?|\?\?|&&|\|\|)?=(?![=>])")
_LOGICAL_BEFORE = re.compile(r"(?:&&|\|\||\?\?)\s*$")
_OPERATOR_BEFORE = re.compile(r"(?:[-+*/%<!~]|(?<!=)>|[=!]==?|[<>]=)\s*$")
_OPERATOR_AFTER = re.compile(
    r"\s*(?:&&|\|\||\?\?|[-+*/%<>]|[=!]==?|[<>]=|instanceof\b|in\b)"
)
_IDENT_BEFORE_PAREN = re.compile(r"[\w$)\]]\s*$")


def _statement_prefix(before: str) -> str:
    """Text of the current statement that precedes the call."""
    cut = max(before.rfind(";"), before.rfind("}"))
    segment = before[cut + 1:]
    last_block = None
    for match in _BLOCK_OPEN.finditer(segment):
        last_block = match
    if last_block is not None:
        segment = segment[last_block.end():]
    return segment


def _inside_open_group(segment: str) -> bool:
    """True when the call sits inside an unclosed call argument list or array."""
    stack: list[tuple[str, int]] = []
    for idx, ch in enumerate(segment):
        if ch in "([":
            stack.append((ch, idx))
        elif ch in ")]" and stack:
            stack.pop()

    for ch, idx in reversed(stack):
        if ch == "[":
            return True
        if _IDENT_BEFORE_PAREN.search(segment[:idx]):
            return True
    return False


def is_expression_target(line: str, call: str = DEFAULT_CALL_TOKEN) -> bool:
    """Call's value feeds an assignment, argument list or operator."""
    code = mask_non_code(line)
    for column in _code_columns(code, call):
        segment = _statement_prefix(code[:column])

        if _ASSIGNMENT.search(segment):
            return True
        if _inside_open_group(segment):
            return True
        if _LOGICAL_BEFORE.search(segment) or _OPERATOR_BEFORE.search(segment):
            return True

        span = call_argument_span(code, column, call)
        if span and _OPERATOR_AFTER.match(code, span[1] + 1):
            return True
    return False


_RETURN = re.compile(r"return\b")


def is_return_value(line: str, call: str = DEFAULT_CALL_TOKEN) -> bool:
    """Trimmed line starts with `return` and contains the call."""
    trimmed = line.strip()
    return bool(_RETURN.match(trimmed)) and call_pattern(call).search(mask_non_code(line)) is not None


# ============================================================================
# DELIMITER COUNTING
# ============================================================================


def delimiter_counts(text: str) -> dict[str, tuple[int, int]]:
    """Raw open/close counts per delimiter pair, strings and comments included."""
    return {
        opener + closer: (text.count(opener), text.count(closer))
        for opener, closer in DELIMITER_PAIRS
    }


def code_delimiter_balance(lines: list[str]) -> tuple[int, int, int]:
    """Net (paren, brace, bracket) balance over code only.

    Strings and comments are skipped, with /* */ state carried across
    lines. Removing a comment therefore never shifts the balance, while
    deleting a line whose code has an unmatched brace does.
    """
    in_block = False
    totals = [0, 0, 0]
    for line in lines:
        code, in_block = _mask(line, in_block)
        for k, (opener, closer) in enumerate(DELIMITER_PAIRS):
            totals[k] += code.count(opener) - code.count(closer)
    return totals[0], totals[1], totals[2]


def indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())
