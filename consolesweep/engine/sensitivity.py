"""Sensitive-argument detection for debug-print calls.

Ranks the argument text of a call against three keyword families plus
literal-shape and naming heuristics. The overall risk is the maximum over
every match, and every matched type name is reported so the reviewer sees
all of them, not just the worst.

Argument capture is single-line and stops at the first ``)``: calls whose
arguments span lines, or contain nested parentheses before the sensitive
part, are rated on the truncated text.
"""

import re
from dataclasses import dataclass

from consolesweep.utils.constants import DEFAULT_CALL_TOKEN

from .models import RiskLevel, Sensitivity
from .patterns import compile_call_template


@dataclass(frozen=True)
class SensitivePattern:
    """One named regex and the risk it implies."""

    name: str
    pattern: re.Pattern
    level: RiskLevel


def _family(level: RiskLevel, *entries: tuple[str, str]) -> tuple[SensitivePattern, ...]:
    return tuple(
        SensitivePattern(name, re.compile(regex, re.IGNORECASE), level)
        for name, regex in entries
    )


HIGH_RISK_PATTERNS = _family(
    RiskLevel.HIGH,
    ("API Key", r"\b(?:api[_-]?key|apikey)\b"),
    ("Access Token", r"\b(?:access[_-]?token|accesstoken)\b"),
    ("Auth Token", r"\b(?:auth[_-]?token|authtoken)\b"),
    ("Bearer Token", r"\b(?:bearer[_-]?token|bearertoken)\b"),
    ("Refresh Token", r"\b(?:refresh[_-]?token|refreshtoken)\b"),
    ("Secret Key", r"\b(?:secret[_-]?key|secretkey)\b"),
    ("Private Key", r"\b(?:private[_-]?key|privatekey)\b"),
    ("Password", r"\b(?:password|passwd|pwd)\b"),
    ("Credential", r"\b(?:credentials?|creds?)\b"),
    ("JWT/Session Token", r"\b(?:jwt|session[_-]?token)\b"),
    ("Connection String", r"\b(?:connection[_-]?string|connectionstring)\b"),
    ("Database URL", r"\b(?:database[_-]?url|databaseurl)\b"),
    ("OAuth Token/Secret", r"\b(?:oauth[_-]?token|client[_-]?secret)\b"),
)

MEDIUM_RISK_PATTERNS = _family(
    RiskLevel.MEDIUM,
    ("User ID", r"\b(?:user[_-]?id|userid)\b"),
    ("Email", r"\b(?:email|e[_-]?mail)\b"),
    ("Phone Number", r"\b(?:phone|telephone|mobile)\b"),
    ("SSN", r"\b(?:ssn|social[_-]?security)\b"),
    ("Credit Card", r"\b(?:credit[_-]?card|creditcard|card[_-]?number)\b"),
    ("Bank Account", r"\b(?:bank[_-]?account|account[_-]?number)\b"),
    ("Session ID", r"\b(?:session[_-]?id|sessionid)\b"),
    ("Tracking ID", r"\b(?:tracking[_-]?id|trackingid)\b"),
    ("IP Address", r"\b(?:ip[_-]?address|ipaddress)\b"),
    ("MAC Address", r"\b(?:mac[_-]?address|macaddress)\b"),
)

LOW_RISK_PATTERNS = _family(
    RiskLevel.LOW,
    ("Hash/Checksum", r"\b(?:hash|checksum)\b"),
    ("Signature", r"\b(?:signature|sig)\b"),
    ("Nonce/Salt", r"\b(?:nonce|salt)\b"),
)

# Literal shapes inside the arguments; any hit forces HIGH
LITERAL_PATTERNS = (
    SensitivePattern(
        "JWT Token Value",
        re.compile(r"[A-Za-z0-9_-]{20,}\.[A-Za-z0-9_-]{20,}\.[A-Za-z0-9_-]{20,}"),
        RiskLevel.HIGH,
    ),
    SensitivePattern("API Key Value", re.compile(r"[A-Za-z0-9]{32,}"), RiskLevel.HIGH),
    SensitivePattern(
        "UUID",
        re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE),
        RiskLevel.HIGH,
    ),
    SensitivePattern("Base64 Data", re.compile(r"[A-Za-z0-9+/]{40,}={0,2}"), RiskLevel.HIGH),
)

# Identifier heuristics; any hit forces at least MEDIUM
_SENSITIVE_STEM = r"(?:token|key|secret|password|credential|auth)"
NAMING_PATTERNS = _family(
    RiskLevel.MEDIUM,
    ("Sensitive Variable Name", r"\b" + _SENSITIVE_STEM + r"\w*\s*[,)]"),
    ("Sensitive Object Property", r"\." + _SENSITIVE_STEM + r"\w*\b"),
    ("Destructured Sensitive Property", r"\{\s*[^}]*" + _SENSITIVE_STEM + r"\w*[^}]*\}"),
)

KEYWORD_FAMILIES = (HIGH_RISK_PATTERNS, MEDIUM_RISK_PATTERNS, LOW_RISK_PATTERNS)

_ARGUMENT_CAPTURE = r"(?<![\w$])<CALL>\s*\(\s*([^)]+)\s*\)"


def extract_arguments(line: str, column: int | None = None, call: str = DEFAULT_CALL_TOKEN) -> str | None:
    """Argument text of the call at ``column`` (or the first call)."""
    match = compile_call_template(_ARGUMENT_CAPTURE, call).search(line, column or 0)
    if not match:
        return None
    return match.group(1)


def detect_sensitive_data(line: str, column: int | None = None, call: str = DEFAULT_CALL_TOKEN) -> Sensitivity:
    """Rate the call's arguments on the line.

    Returns ``Sensitivity(RiskLevel.NONE, [])`` when there is no parseable
    argument list.
    """
    arguments = extract_arguments(line, column, call)
    if not arguments:
        return Sensitivity()

    risk = RiskLevel.NONE
    matched: list[str] = []

    def hit(pattern: SensitivePattern) -> None:
        nonlocal risk
        if pattern.name not in matched:
            matched.append(pattern.name)
        if risk < pattern.level:
            risk = pattern.level

    for family in KEYWORD_FAMILIES:
        for pattern in family:
            if pattern.pattern.search(arguments):
                hit(pattern)

    for pattern in LITERAL_PATTERNS:
        if pattern.pattern.search(arguments):
            hit(pattern)

    # The capture drops the closing paren; put it back so a trailing
    # identifier still ends in [,)]
    closed = arguments + ")"
    for pattern in NAMING_PATTERNS:
        if pattern.pattern.search(closed):
            hit(pattern)

    return Sensitivity(risk_level=risk, patterns=matched)
