"""Single-line edits for debug-print call sites.

Every transform either returns the new text of the line, or signals that
the whole line must go (``removed=True``). The transformer never touches
other lines except through ``remove_block_comment``, which returns explicit
per-line edits for the applier to carry out.
"""

from consolesweep.utils.constants import DEFAULT_CALL_TOKEN, DEFAULT_ERROR_CALL, DEFAULT_INFO_CALL

from . import patterns
from .models import Action, BlockCommentEdit, TransformResult, ValidationResult


def _keep_eol(new: str, old: str) -> str:
    if old.endswith("\r") and not new.endswith("\r"):
        return new + "\r"
    return new


class LineTransformer:
    """Apply one action to one line of source text."""

    def __init__(
        self,
        call: str = DEFAULT_CALL_TOKEN,
        error_call: str = DEFAULT_ERROR_CALL,
        info_call: str = DEFAULT_INFO_CALL,
    ):
        self.call = call
        self.error_call = error_call
        self.info_call = info_call

    def transform(self, line: str, action: Action | str, column: int | None = None) -> TransformResult:
        """Produce the edited line for ``action``.

        Unknown actions fail with ``success=False``; the caller treats them
        as keep.
        """
        try:
            action = Action(action)
        except ValueError:
            return TransformResult(success=False, new_line=line, error=f"Unknown action: {action!r}")

        action = action.resolved()

        if action is Action.KEEP:
            return TransformResult(success=True, new_line=line)

        if action in (Action.CONVERT_ERROR, Action.CONVERT_INFO):
            target = self.error_call if action is Action.CONVERT_ERROR else self.info_call
            new_line = self.convert(line, target, column)
            if new_line is None:
                return TransformResult(
                    success=False,
                    new_line=line,
                    error=f"No {self.call} call at column {column}",
                )
            return TransformResult(success=True, new_line=new_line)

        if action is Action.DELETE:
            if patterns.is_standalone_call(line, self.call):
                return TransformResult(success=True, new_line=None, removed=True)
            return TransformResult(success=True, new_line=line)

        return self.remove_commented_call(line, column)

    def convert(self, line: str, replacement: str, column: int | None = None) -> str | None:
        """Swap the call token for ``replacement``.

        With ``column`` only that token changes; without it every call token
        outside string literals does. Returns None when ``column`` does not
        point at a call token.
        """
        size = len(self.call)
        if column is not None:
            if not patterns.call_pattern(self.call).match(line, column):
                return None
            return line[:column] + replacement + line[column + size:]

        new_line = line
        for col in reversed(patterns.find_call_columns(line, self.call)):
            new_line = new_line[:col] + replacement + new_line[col + size:]
        return new_line

    def convert_to_error(self, line: str, column: int | None = None) -> str | None:
        return self.convert(line, self.error_call, column)

    def convert_to_info(self, line: str, column: int | None = None) -> str | None:
        return self.convert(line, self.info_call, column)

    def remove_commented_call(self, line: str, column: int | None = None) -> TransformResult:
        """Cut the comment holding the call out of the line.

        Handles a whole-line ``//`` comment, a trailing ``//`` comment after
        code, and a one-line ``/* */`` span with code on either side. Block
        comments that continue onto the next line go through
        ``remove_block_comment`` instead.
        """
        if patterns.is_commented(line, self.call) and line.strip().startswith("//"):
            return TransformResult(success=True, new_line=None, removed=True, excised=line.strip())

        regions, _ = patterns.scan_regions(line)
        comment = None
        for region in regions:
            if not region.is_comment:
                continue
            if column is not None and region.contains(column):
                comment = region
                break
            if column is None and patterns.call_pattern(self.call).search(line, region.start, region.end):
                comment = region
                break

        if comment is None:
            return TransformResult(success=True, new_line=line)

        if comment.continued:
            return TransformResult(
                success=True,
                new_line=line,
                warnings=["Comment continues past this line; left for block removal"],
            )

        excised = line[comment.start:comment.end]
        if comment.kind == "line-comment":
            remaining = line[:comment.start].rstrip()
        else:
            remaining = line[:comment.start] + line[comment.end:]

        if not remaining.strip():
            return TransformResult(success=True, new_line=None, removed=True, excised=excised)

        return TransformResult(success=True, new_line=_keep_eol(remaining, line), excised=excised)

    def remove_block_comment(self, lines: list[str], start_index: int) -> BlockCommentEdit:
        """Plan the removal of a /* */ comment opening on ``lines[start_index]``.

        Scans forward with no distance bound for the closing ``*/``. Code
        before the opener and after the closer stays; lines left empty are
        scheduled for removal. ``found`` is False when the line holds no
        opening comment, the comment never closes, or it does not contain
        the call.
        """
        if not 0 <= start_index < len(lines):
            return BlockCommentEdit()

        in_block = False
        for line in lines[:start_index]:
            _, in_block = patterns.scan_regions(line, in_block)

        first = lines[start_index]
        regions, _ = patterns.scan_regions(first, in_block)
        opener = None
        for region in regions:
            if region.kind == "block-comment" and region.continued and not (in_block and region.start == 0):
                opener = region
        if opener is None:
            return BlockCommentEdit()

        end_index = None
        close_pos = 0
        for j in range(start_index + 1, len(lines)):
            pos = lines[j].find("*/")
            if pos != -1:
                end_index = j
                close_pos = pos + 2
                break
        if end_index is None:
            return BlockCommentEdit()

        last = lines[end_index]
        body = [first[opener.start:]] + lines[start_index + 1:end_index] + [last[:close_pos]]
        comment_text = "\n".join(body)
        if not patterns.call_pattern(self.call).search(comment_text):
            return BlockCommentEdit()

        edit = BlockCommentEdit(
            found=True,
            start_line=start_index,
            end_line=end_index,
            comment_text=comment_text,
        )

        before = first[:opener.start].rstrip()
        if before.strip():
            edit.modified_lines[start_index] = _keep_eol(before, first)
        else:
            edit.lines_to_remove.append(start_index)

        edit.lines_to_remove.extend(range(start_index + 1, end_index))

        after = last[close_pos:]
        if after.strip():
            edit.modified_lines[end_index] = after
        else:
            edit.lines_to_remove.append(end_index)

        return edit

    def validate(self, original: str, transformed: str, excised: str = "") -> ValidationResult:
        """Check that the edit did not change delimiter balance.

        Counts of ``(``/``)``, ``{``/``}``, ``[``/``]`` in ``transformed``
        must equal those of ``original`` minus those of ``excised`` (text a
        comment removal cut out on purpose).
        """
        result = ValidationResult()
        before = patterns.delimiter_counts(original)
        after = patterns.delimiter_counts(transformed)
        cut = patterns.delimiter_counts(excised)

        for pair, (opens, closes) in before.items():
            expected = (opens - cut[pair][0], closes - cut[pair][1])
            if after[pair] != expected:
                result.valid = False
                result.errors.append(
                    f"Delimiter mismatch for {pair}: expected {expected[0]}/{expected[1]}, "
                    f"got {after[pair][0]}/{after[pair][1]}"
                )

        original_semicolon = original.rstrip().endswith(";")
        transformed_semicolon = transformed.rstrip().endswith(";")
        if transformed.strip() and original_semicolon != transformed_semicolon:
            result.warnings.append("Terminal semicolon changed")

        return result
