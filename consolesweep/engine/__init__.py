"""Context classification and safe line-transformation engine.

Public surface used by the pipeline:

    analyze_file(path, content) -> list[Occurrence]
    apply_decisions(content, decisions) -> str
"""

from .applier import ApplyResult, EditApplier, apply_decisions
from .classifier import ArrowBodyRule, ContextClassifier, analyze_file
from .models import (
    Action,
    ContextFlags,
    Decision,
    FileResult,
    FileStatistics,
    Occurrence,
    PromptChoice,
    RiskLevel,
    SessionStatistics,
    Sensitivity,
    TransformResult,
    ValidationResult,
)
from .policy import (
    AutomaticPolicy,
    InteractivePolicy,
    PolicyOutcome,
    Prompter,
    SkipPattern,
    SkipPatternCache,
    decide_automatic,
    explain_automatic,
)
from .sensitivity import detect_sensitive_data
from .transformer import LineTransformer

__all__ = [
    "Action",
    "ApplyResult",
    "ArrowBodyRule",
    "AutomaticPolicy",
    "ContextClassifier",
    "ContextFlags",
    "Decision",
    "EditApplier",
    "FileResult",
    "FileStatistics",
    "InteractivePolicy",
    "LineTransformer",
    "Occurrence",
    "PolicyOutcome",
    "PromptChoice",
    "Prompter",
    "RiskLevel",
    "SessionStatistics",
    "Sensitivity",
    "SkipPattern",
    "SkipPatternCache",
    "TransformResult",
    "ValidationResult",
    "analyze_file",
    "apply_decisions",
    "decide_automatic",
    "detect_sensitive_data",
    "explain_automatic",
]
