"""Per-file processing: analyze, decide, apply, count.

The processor owns no I/O besides the backup it takes before deciding on a
file; reading and writing source text is the runner's job.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

from consolesweep.backup import BackupError, BackupManager
from consolesweep.engine.applier import EditApplier
from consolesweep.engine.classifier import ArrowBodyRule, ContextClassifier
from consolesweep.engine.models import FileResult, Occurrence, SessionStatistics
from consolesweep.engine.policy import AutomaticPolicy, InteractivePolicy, PolicyOutcome, Prompter
from consolesweep.engine.transformer import LineTransformer
from consolesweep.utils.constants import (
    CATCH_LOOKBACK,
    CONDITIONAL_LOOKBACK,
    DEFAULT_CALL_TOKEN,
    DEFAULT_CONTEXT_LINES,
    DEFAULT_ERROR_CALL,
    DEFAULT_INFO_CALL,
    FUNCTION_LOOKBACK,
)
from consolesweep.utils.logging import logger


class Mode(Enum):
    MANUAL = "manual"
    AUTO = "auto"


@dataclass
class ProcessorConfig:
    """Everything that shapes how one file is processed."""

    mode: Mode = Mode.MANUAL
    interactive: bool = True
    dry_run: bool = False
    verbose: bool = False
    call_token: str = DEFAULT_CALL_TOKEN
    error_call: str = DEFAULT_ERROR_CALL
    info_call: str = DEFAULT_INFO_CALL
    arrow_rule: ArrowBodyRule = ArrowBodyRule.DIRECT
    context_lines: int = DEFAULT_CONTEXT_LINES
    catch_lookback: int = CATCH_LOOKBACK
    function_lookback: int = FUNCTION_LOOKBACK
    conditional_lookback: int = CONDITIONAL_LOOKBACK

    @property
    def uses_prompter(self) -> bool:
        return self.mode is Mode.MANUAL and self.interactive

    @classmethod
    def from_runtime(cls, cfg: dict[str, Any], **overrides: Any) -> "ProcessorConfig":
        """Build from a load_runtime_config() dict; None overrides are ignored."""
        arrow_rule = cfg["analysis"]["arrow_rule"]
        try:
            rule = ArrowBodyRule(arrow_rule)
        except ValueError:
            logger.warning("Unknown arrow_rule '{rule}', using direct", rule=arrow_rule)
            rule = ArrowBodyRule.DIRECT

        config = cls(
            call_token=cfg["scan"]["call_token"],
            error_call=cfg["transform"]["error_call"],
            info_call=cfg["transform"]["info_call"],
            arrow_rule=rule,
            context_lines=cfg["scan"]["context_lines"],
            catch_lookback=cfg["analysis"]["catch_lookback"],
            function_lookback=cfg["analysis"]["function_lookback"],
            conditional_lookback=cfg["analysis"]["conditional_lookback"],
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        return config


class FileProcessor:
    """Run one file through classifier, policy and applier."""

    def __init__(
        self,
        config: ProcessorConfig,
        prompter: Prompter | None = None,
        backup_manager: BackupManager | None = None,
        session: SessionStatistics | None = None,
    ):
        self.config = config
        self.prompter = prompter
        self.backup_manager = backup_manager
        self.session = session if session is not None else SessionStatistics()

        self.classifier = ContextClassifier(
            call=config.call_token,
            arrow_rule=config.arrow_rule,
            context_lines=config.context_lines,
            catch_lookback=config.catch_lookback,
            function_lookback=config.function_lookback,
            conditional_lookback=config.conditional_lookback,
        )
        self.applier = EditApplier(
            LineTransformer(config.call_token, config.error_call, config.info_call)
        )

    def analyze(self, path: str, content: str) -> list[Occurrence]:
        return self.classifier.analyze_file(path, content)

    def _policy(self):
        if self.config.uses_prompter and self.prompter is not None:
            return InteractivePolicy(self.prompter, self.config.call_token)
        return AutomaticPolicy()

    def process_file(self, path: Path | str, content: str) -> FileResult:
        """Classify, decide and apply edits for one file's text.

        Never raises for engine problems: they land in ``result.errors`` or
        ``result.warnings`` and the file is left unmodified.
        """
        path_str = str(path)
        result = FileResult(path=path_str, original_content=content, new_content=content)

        occurrences = self.analyze(path_str, content)
        if not occurrences:
            return result

        self.session.files_with_calls += 1
        for occurrence in occurrences:
            result.statistics.record_occurrence(occurrence)

        if self.backup_manager is not None and not self.config.dry_run:
            try:
                result.backup_path = str(self.backup_manager.create_backup(path))
            except BackupError as e:
                logger.error("Skipping {path}: {err}", path=path_str, err=e)
                result.errors.append(str(e))
                self.session.errors += 1
                self.session.files_failed += 1
                self.session.merge_file(result.statistics)
                return result

        outcome: PolicyOutcome = self._policy().decide(occurrences, path_str)
        result.decisions = outcome.decisions
        result.quit_requested = outcome.quit_requested
        self.session.reviewed += outcome.reviewed

        applied = self.applier.apply(content, outcome.decisions)
        result.warnings.extend(applied.warnings)
        for warning in applied.warnings:
            logger.debug("{path}: {warning}", path=path_str, warning=warning)
        self.session.warnings += len(applied.warnings)

        result.outcomes = applied.outcomes
        for decision, action in applied.outcomes:
            result.statistics.record_outcome(decision, action)
            if self.config.uses_prompter and self.prompter is not None:
                key = decision.action.value
                self.session.manual_decisions[key] = self.session.manual_decisions.get(key, 0) + 1
        self.session.merge_file(result.statistics)
        self.session.files_processed += 1

        if applied.modified:
            result.new_content = applied.new_content
            result.modified = True

        if self.config.verbose:
            for decision, action in sorted(applied.outcomes, key=lambda o: o[0].occurrence.line_number):
                logger.debug(
                    "{path}:{line} {decided} -> {applied}: {text}",
                    path=path_str,
                    line=decision.occurrence.line_number,
                    decided=decision.action.value,
                    applied=action.value,
                    text=decision.occurrence.content,
                )

        return result
