"""Decision policies: map classified occurrences to actions.

AutomaticPolicy walks a fixed, ordered rule table. InteractivePolicy asks a
``Prompter`` for each occurrence and remembers "skip all similar" answers in
a per-file ``SkipPatternCache``.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol

from consolesweep.utils.constants import DEFAULT_CALL_TOKEN
from consolesweep.utils.logging import logger

from . import patterns
from .models import Action, Decision, Occurrence, PromptChoice, RiskLevel

AutoRule = tuple[str, Callable[[Occurrence], bool], Action]

# First matching rule wins
AUTO_RULES: tuple[AutoRule, ...] = (
    ("commented", lambda occ: occ.is_commented, Action.REMOVE_COMMENT),
    ("functional", lambda occ: occ.is_functional, Action.KEEP),
    ("error-handler", lambda occ: occ.is_in_error_handler, Action.CONVERT_ERROR),
    ("high-sensitivity", lambda occ: occ.sensitivity.risk_level is RiskLevel.HIGH, Action.KEEP),
)

DEFAULT_RULE = "debug-noise"
DEFAULT_AUTO_ACTION = Action.DELETE


def explain_automatic(occurrence: Occurrence) -> tuple[Action, str]:
    """(action, name of the rule that chose it)."""
    for name, predicate, action in AUTO_RULES:
        if predicate(occurrence):
            return action, name
    return DEFAULT_AUTO_ACTION, DEFAULT_RULE


def decide_automatic(occurrence: Occurrence) -> Action:
    return explain_automatic(occurrence)[0]


# ============================================================================
# SKIP PATTERNS
# ============================================================================


@dataclass(frozen=True)
class SkipPattern:
    """Structural fingerprint of an occurrence; argument values never count."""

    is_commented: bool
    is_in_error_handler: bool
    is_functional: bool
    shape: str


_FALLBACK_ARGS = r"(?<![\w$])<CALL>\s*\([^)]*\)"


def normalize_call_shape(text: str, call: str = DEFAULT_CALL_TOKEN) -> str:
    """Replace every call's argument list with ``(...)``."""
    stripped = text.strip()
    masked = patterns.mask_non_code(stripped)
    pieces = []
    last = 0
    for column in patterns.find_call_columns(stripped, call):
        if column < last:
            continue
        span = patterns.call_argument_span(masked, column, call)
        if span is None:
            continue
        pieces.append(stripped[last:column] + call + "(...)")
        last = span[1] + 1
    pieces.append(stripped[last:])
    shape = "".join(pieces)

    # Commented calls are masked above; fall back to the simple capture
    return patterns.compile_call_template(_FALLBACK_ARGS, call).sub(lambda _: call + "(...)", shape)


def fingerprint(occurrence: Occurrence, call: str = DEFAULT_CALL_TOKEN) -> SkipPattern:
    return SkipPattern(
        is_commented=occurrence.is_commented,
        is_in_error_handler=occurrence.is_in_error_handler,
        is_functional=occurrence.is_functional,
        shape=normalize_call_shape(occurrence.raw_text, call),
    )


class SkipPatternCache:
    """Fingerprints the user chose to skip within the current file."""

    def __init__(self, call: str = DEFAULT_CALL_TOKEN):
        self.call = call
        self._patterns: set[SkipPattern] = set()

    def add(self, occurrence: Occurrence) -> SkipPattern:
        pattern = fingerprint(occurrence, self.call)
        self._patterns.add(pattern)
        return pattern

    def matches(self, occurrence: Occurrence) -> bool:
        return fingerprint(occurrence, self.call) in self._patterns

    def clear(self) -> None:
        self._patterns.clear()

    def __len__(self) -> int:
        return len(self._patterns)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._patterns


# ============================================================================
# POLICIES
# ============================================================================


class Prompter(Protocol):
    """Interactive collaborator used in manual mode."""

    def prompt(self, occurrence: Occurrence, file_path: str) -> PromptChoice: ...

    def confirm(self, message: str) -> bool: ...

    def show_progress(self, current: int, total: int, file_path: str) -> None: ...


@dataclass
class PolicyOutcome:
    """Decisions for one file plus how they were reached."""

    decisions: list[Decision] = field(default_factory=list)
    reviewed: int = 0
    skipped: int = 0
    quit_requested: bool = False


class AutomaticPolicy:
    """Decide every occurrence through the rule table."""

    def decide(self, occurrences: list[Occurrence], file_path: str = "") -> PolicyOutcome:
        outcome = PolicyOutcome()
        for occurrence in occurrences:
            action, rule = explain_automatic(occurrence)
            logger.debug(
                "{path}:{line} -> {action} ({rule})",
                path=file_path,
                line=occurrence.line_number,
                action=action.value,
                rule=rule,
            )
            outcome.decisions.append(Decision(occurrence, action))
        return outcome


class InteractivePolicy:
    """Ask the prompter about each occurrence in turn."""

    def __init__(self, prompter: Prompter, call: str = DEFAULT_CALL_TOKEN, skip_cache: SkipPatternCache | None = None):
        self.prompter = prompter
        self.call = call
        self.skip_cache = skip_cache if skip_cache is not None else SkipPatternCache(call)

    def decide(self, occurrences: list[Occurrence], file_path: str = "") -> PolicyOutcome:
        outcome = PolicyOutcome()
        self.skip_cache.clear()
        total = len(occurrences)

        for position, occurrence in enumerate(occurrences, start=1):
            if self.skip_cache.matches(occurrence):
                outcome.skipped += 1
                outcome.decisions.append(Decision(occurrence, Action.SKIP))
                continue

            self.prompter.show_progress(position, total, file_path)
            outcome.reviewed += 1

            if occurrence.is_commented:
                message = f"Remove commented {self.call} at line {occurrence.line_number}?"
                action = Action.REMOVE_COMMENT if self.prompter.confirm(message) else Action.KEEP
                outcome.decisions.append(Decision(occurrence, action))
                continue

            choice = self.prompter.prompt(occurrence, file_path)
            while choice is PromptChoice.INVALID:
                choice = self.prompter.prompt(occurrence, file_path)

            if choice is PromptChoice.QUIT:
                logger.info(
                    "Quit at {path}:{line}; {count} decision(s) kept",
                    path=file_path,
                    line=occurrence.line_number,
                    count=len(outcome.decisions),
                )
                outcome.quit_requested = True
                break

            if choice is PromptChoice.SKIP:
                self.skip_cache.add(occurrence)

            outcome.decisions.append(Decision(occurrence, choice.to_action()))

        return outcome
