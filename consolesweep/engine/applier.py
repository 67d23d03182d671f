"""Apply a file's decisions to its text, all or nothing.

Decisions run bottom-up (descending line, then column) so an edit never
shifts a line or column that is still pending. Per-line edits that fail
validation are dropped with a warning. After every edit is collected the
code delimiter balance of the whole file is compared with the original; a
mismatch rejects the entire edit set and the original text comes back.
"""

from dataclasses import dataclass, field

from consolesweep.utils.logging import logger

from .models import Action, Decision
from .patterns import code_delimiter_balance
from .transformer import LineTransformer


@dataclass
class ApplyResult:
    """New file text plus the action each decision actually received."""

    new_content: str
    modified: bool = False
    warnings: list[str] = field(default_factory=list)
    rejected: bool = False
    # (decision, action applied); KEEP when a decision could not be carried out
    outcomes: list[tuple[Decision, Action]] = field(default_factory=list)


class _EditPlan:
    """Replacements and removals collected before anything is spliced."""

    def __init__(self, lines: list[str]):
        self.lines = lines
        self.replacements: dict[int, str] = {}
        self.removals: set[int] = set()
        self.block_spans: set[int] = set()

    def current(self, index: int) -> str:
        return self.replacements.get(index, self.lines[index])

    def replace(self, index: int, text: str) -> None:
        if index not in self.removals:
            self.replacements[index] = text

    def remove(self, index: int) -> None:
        self.removals.add(index)
        self.replacements.pop(index, None)

    @property
    def empty(self) -> bool:
        return not self.replacements and not self.removals

    def render(self) -> list[str]:
        new_lines = list(self.lines)
        for index, text in self.replacements.items():
            new_lines[index] = text
        for index in sorted(self.removals, reverse=True):
            del new_lines[index]
        return new_lines


class EditApplier:
    """Carry out decisions through a LineTransformer."""

    def __init__(self, transformer: LineTransformer | None = None):
        self.transformer = transformer or LineTransformer()

    def apply(self, original_text: str, decisions: list[Decision]) -> ApplyResult:
        lines = original_text.split("\n")
        plan = _EditPlan(lines)
        result = ApplyResult(new_content=original_text)

        ordered = sorted(
            decisions,
            key=lambda d: (d.occurrence.line_number, d.occurrence.column),
            reverse=True,
        )
        for decision in ordered:
            applied = self._apply_one(decision, plan, result.warnings)
            result.outcomes.append((decision, applied))

        if plan.empty:
            return result

        new_lines = plan.render()
        if code_delimiter_balance(lines) != code_delimiter_balance(new_lines):
            result.warnings.append("File-level delimiter balance changed; all edits rejected")
            result.rejected = True
            result.outcomes = [(decision, Action.KEEP) for decision, _ in result.outcomes]
            logger.debug("Edit set rejected: balance {before} -> {after}",
                         before=code_delimiter_balance(lines), after=code_delimiter_balance(new_lines))
            return result

        result.new_content = "\n".join(new_lines)
        result.modified = result.new_content != original_text
        return result

    def _apply_one(self, decision: Decision, plan: _EditPlan, warnings: list[str]) -> Action:
        occurrence = decision.occurrence
        index = occurrence.line_index
        line_no = occurrence.line_number

        try:
            action = Action(decision.action).resolved()
        except ValueError:
            warnings.append(f"Line {line_no}: unknown action {decision.action!r}, kept")
            return Action.KEEP

        if action is Action.KEEP:
            return Action.KEEP

        if not 0 <= index < len(plan.lines):
            warnings.append(f"Line {line_no}: out of range, kept")
            return Action.KEEP

        if index in plan.removals:
            # Same line already removed by another decision (several calls in one comment)
            if action in (Action.DELETE, Action.REMOVE_COMMENT):
                return action
            warnings.append(f"Line {line_no}: already removed by another edit")
            return Action.REMOVE_COMMENT if occurrence.is_commented else Action.DELETE

        if action is Action.REMOVE_COMMENT and occurrence.comment_span is not None:
            return self._remove_block(occurrence.comment_span[0], plan, line_no, warnings)

        text = plan.current(index)
        crlf = text.endswith("\r")
        body = text[:-1] if crlf else text

        transformed = self.transformer.transform(body, action, occurrence.column)
        warnings.extend(f"Line {line_no}: {w}" for w in transformed.warnings)

        if not transformed.success:
            warnings.append(f"Line {line_no}: {transformed.error}; kept")
            return Action.KEEP

        if transformed.removed:
            plan.remove(index)
            return action

        new_line = transformed.new_line
        if new_line == body:
            if action is Action.DELETE:
                warnings.append(f"Line {line_no}: not a standalone call; left in place")
            else:
                warnings.append(f"Line {line_no}: nothing to change for {action.value}")
            return Action.KEEP

        validation = self.transformer.validate(body, new_line, transformed.excised)
        if not validation.valid:
            warnings.extend(f"Line {line_no}: {e}" for e in validation.errors)
            return Action.KEEP
        warnings.extend(f"Line {line_no}: {w}" for w in validation.warnings)

        plan.replace(index, new_line + "\r" if crlf else new_line)
        return action

    def _remove_block(self, start: int, plan: _EditPlan, line_no: int, warnings: list[str]) -> Action:
        if start in plan.block_spans:
            return Action.REMOVE_COMMENT

        view = [plan.current(i) for i in range(len(plan.lines))]
        edit = self.transformer.remove_block_comment(view, start)
        if not edit.found:
            warnings.append(f"Line {line_no}: block comment not found; kept")
            return Action.KEEP

        plan.block_spans.add(start)
        for index, text in edit.modified_lines.items():
            plan.replace(index, text)
        for index in edit.lines_to_remove:
            plan.remove(index)
        return Action.REMOVE_COMMENT


def apply_decisions(content: str, decisions: list[Decision], transformer: LineTransformer | None = None) -> str:
    """New text of ``content`` after ``decisions``; the original on rejection."""
    return EditApplier(transformer).apply(content, decisions).new_content
