"""Data contracts shared by the classification and transformation engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class RiskLevel(Enum):
    """Sensitivity of a call's arguments, ordered from NONE to HIGH."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RISK_ORDER[self]

    def __lt__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: "RiskLevel") -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank


_RISK_ORDER = {
    RiskLevel.NONE: 0,
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
}


class Action(Enum):
    """What to do with one occurrence."""

    DELETE = "delete"
    CONVERT_ERROR = "convert-error"
    CONVERT_INFO = "convert-info"
    REMOVE_COMMENT = "remove-comment"
    KEEP = "keep"
    SKIP = "skip"

    def resolved(self) -> "Action":
        """SKIP is applied as KEEP."""
        return Action.KEEP if self is Action.SKIP else self


class PromptChoice(Enum):
    """Answers the interactive collaborator may return."""

    DELETE = "delete"
    KEEP = "keep"
    CONVERT_INFO = "convert-info"
    CONVERT_ERROR = "convert-error"
    SKIP = "skip"
    QUIT = "quit"
    INVALID = "invalid"

    def to_action(self) -> Action | None:
        """Map to an Action; QUIT and INVALID have none."""
        try:
            return Action(self.value)
        except ValueError:
            return None


@dataclass
class Sensitivity:
    """Risk rating plus every pattern name that matched."""

    risk_level: RiskLevel = RiskLevel.NONE
    patterns: list[str] = field(default_factory=list)

    @property
    def is_sensitive(self) -> bool:
        return self.risk_level is not RiskLevel.NONE


@dataclass
class ContextFlags:
    """Raw syntactic context of a call site, one flag per matcher."""

    is_ternary: bool = False
    is_chain: bool = False
    is_arrow_body: bool = False
    is_expression: bool = False
    is_return_value: bool = False
    is_in_function: bool = False
    is_in_conditional: bool = False
    indent_level: int = 0


@dataclass
class Occurrence:
    """One debug-print call site found in a file."""

    line_number: int
    column: int
    raw_text: str

    is_commented: bool = False
    is_in_error_handler: bool = False
    is_functional: bool = False
    sensitivity: Sensitivity = field(default_factory=Sensitivity)
    context: ContextFlags = field(default_factory=ContextFlags)

    surrounding_window: list[str] = field(default_factory=list)
    window_start: int = 1

    # (start, end) 0-based line indexes of an enclosing multi-line /* */ comment
    comment_span: tuple[int, int] | None = None

    file_path: str = ""

    @property
    def line_index(self) -> int:
        return self.line_number - 1

    @property
    def content(self) -> str:
        return self.raw_text.strip()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "file": self.file_path,
            "line": self.line_number,
            "column": self.column,
            "content": self.content,
            "commented": self.is_commented,
            "in_error_handler": self.is_in_error_handler,
            "functional": self.is_functional,
            "risk": self.sensitivity.risk_level.value,
            "sensitive_patterns": list(self.sensitivity.patterns),
            "context": {
                "ternary": self.context.is_ternary,
                "chain": self.context.is_chain,
                "arrow_body": self.context.is_arrow_body,
                "expression": self.context.is_expression,
                "return_value": self.context.is_return_value,
                "in_function": self.context.is_in_function,
                "in_conditional": self.context.is_in_conditional,
            },
        }


@dataclass
class Decision:
    """An (occurrence, action) pair owned by one file's pass."""

    occurrence: Occurrence
    action: Action


@dataclass
class TransformResult:
    """Output of the line transformer.

    ``removed=True`` means the caller must excise the whole line; in that
    case ``new_line`` is None.
    """

    success: bool
    new_line: str | None
    removed: bool = False
    error: str | None = None
    excised: str = ""
    warnings: list[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Delimiter balance check for one transformed line."""

    valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class BlockCommentEdit:
    """Line edits that cut one multi-line /* */ comment out of a file."""

    found: bool = False
    start_line: int = 0
    end_line: int = 0
    lines_to_remove: list[int] = field(default_factory=list)
    modified_lines: dict[int, str] = field(default_factory=dict)
    comment_text: str = ""


def _risk_counter() -> dict[str, int]:
    return {"high": 0, "medium": 0, "low": 0}


@dataclass
class FileStatistics:
    """Per-file counters returned to the orchestrator."""

    found: int = 0
    processed: int = 0
    removed: int = 0
    converted: int = 0
    kept: int = 0
    skipped: int = 0
    commented_found: int = 0
    commented_removed: int = 0
    converted_to_info: int = 0
    converted_to_error: int = 0
    functional_detected: int = 0
    functional_preserved: int = 0
    catch_block_found: int = 0
    catch_block_converted: int = 0
    potentially_sensitive: int = 0
    sensitive_removed: int = 0
    sensitive_kept: int = 0
    sensitive_by_risk: dict[str, int] = field(default_factory=_risk_counter)

    def record_occurrence(self, occurrence: Occurrence) -> None:
        """Count classification facts for a freshly analyzed occurrence."""
        self.found += 1
        if occurrence.is_commented:
            self.commented_found += 1
        if occurrence.is_functional:
            self.functional_detected += 1
        if occurrence.is_in_error_handler:
            self.catch_block_found += 1
        level = occurrence.sensitivity.risk_level
        if level is not RiskLevel.NONE:
            self.potentially_sensitive += 1
            self.sensitive_by_risk[level.value] += 1

    def record_outcome(self, decision: Decision, action: Action) -> None:
        """Count one decision by the action the applier actually carried out."""
        occurrence = decision.occurrence
        self.processed += 1

        if decision.action is Action.SKIP:
            self.skipped += 1

        if action is Action.DELETE:
            self.removed += 1
        elif action is Action.REMOVE_COMMENT:
            self.removed += 1
            self.commented_removed += 1
        elif action is Action.CONVERT_INFO:
            self.converted += 1
            self.converted_to_info += 1
        elif action is Action.CONVERT_ERROR:
            self.converted += 1
            self.converted_to_error += 1
            if occurrence.is_in_error_handler:
                self.catch_block_converted += 1
        else:
            self.kept += 1
            if occurrence.is_functional:
                self.functional_preserved += 1

        if occurrence.sensitivity.is_sensitive:
            if action in (Action.DELETE, Action.REMOVE_COMMENT):
                self.sensitive_removed += 1
            else:
                self.sensitive_kept += 1


@dataclass
class SessionStatistics:
    """Run-wide counters. The engine increments; reporting only reads."""

    files_scanned: int = 0
    files_with_calls: int = 0
    files_processed: int = 0
    files_modified: int = 0
    files_failed: int = 0

    found: int = 0
    reviewed: int = 0
    deleted: int = 0
    kept: int = 0
    converted_to_info: int = 0
    converted_to_error: int = 0
    skipped: int = 0

    commented_found: int = 0
    commented_removed: int = 0
    functional_detected: int = 0
    functional_preserved: int = 0
    catch_block_found: int = 0
    catch_block_converted: int = 0

    potentially_sensitive: int = 0
    sensitive_removed: int = 0
    sensitive_kept: int = 0
    sensitive_by_risk: dict[str, int] = field(default_factory=_risk_counter)

    manual_decisions: dict[str, int] = field(default_factory=dict)

    warnings: int = 0
    errors: int = 0
    elapsed_seconds: float = 0.0

    @property
    def converted(self) -> int:
        return self.converted_to_info + self.converted_to_error

    def merge_file(self, stats: FileStatistics) -> None:
        """Fold one file's counters into the session."""
        self.found += stats.found
        self.deleted += stats.removed
        self.kept += stats.kept
        self.skipped += stats.skipped
        self.converted_to_info += stats.converted_to_info
        self.converted_to_error += stats.converted_to_error

        self.commented_found += stats.commented_found
        self.commented_removed += stats.commented_removed
        self.functional_detected += stats.functional_detected
        self.functional_preserved += stats.functional_preserved
        self.catch_block_found += stats.catch_block_found
        self.catch_block_converted += stats.catch_block_converted

        self.potentially_sensitive += stats.potentially_sensitive
        self.sensitive_removed += stats.sensitive_removed
        self.sensitive_kept += stats.sensitive_kept
        for level, count in stats.sensitive_by_risk.items():
            self.sensitive_by_risk[level] += count


@dataclass
class FileResult:
    """Outcome of processing one file."""

    path: str
    original_content: str
    new_content: str
    modified: bool = False
    statistics: FileStatistics = field(default_factory=FileStatistics)
    decisions: list[Decision] = field(default_factory=list)
    # (decision, action actually applied)
    outcomes: list[tuple[Decision, Action]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    backup_path: str | None = None
    quit_requested: bool = False

    def remaining_sensitive(self, minimum: RiskLevel = RiskLevel.MEDIUM) -> list[Occurrence]:
        """Sensitive occurrences still in the file after this pass."""
        removed = (Action.DELETE, Action.REMOVE_COMMENT)
        return [
            decision.occurrence
            for decision, action in self.outcomes
            if action not in removed and minimum <= decision.occurrence.sensitivity.risk_level
        ]
