"""Tests for sensitive-argument detection."""

import pytest

from consolesweep.engine.models import RiskLevel
from consolesweep.engine.sensitivity import detect_sensitive_data, extract_arguments

JWT = (
    "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9"
    ".eyJzdWIiOiIxMjM0NTY3ODkwIn0"
    ".dozjgNryP4J3jVmNHl0w5N_XgL0n3I9PlFUP0THsR8U"
)


class TestKeywordFamilies:
    def test_plain_message_is_not_sensitive(self):
        result = detect_sensitive_data('console.log("hello world");')
        assert result.risk_level is RiskLevel.NONE
        assert result.patterns == []
        assert not result.is_sensitive

    @pytest.mark.parametrize("line, name", [
        ('console.log("apiKey:", apiKey);', "API Key"),
        ("console.log(password);", "Password"),
        ("console.log(req.headers, sessionToken);", "JWT/Session Token"),
        ("console.log(creds);", "Credential"),
        ("console.log(clientSecret);", "OAuth Token/Secret"),
    ])
    def test_high(self, line, name):
        result = detect_sensitive_data(line)
        assert result.risk_level is RiskLevel.HIGH
        assert name in result.patterns

    @pytest.mark.parametrize("line, name", [
        ("console.log(email);", "Email"),
        ("console.log(userId);", "User ID"),
        ("console.log(phone);", "Phone Number"),
    ])
    def test_medium(self, line, name):
        result = detect_sensitive_data(line)
        assert result.risk_level is RiskLevel.MEDIUM
        assert name in result.patterns

    def test_low(self):
        result = detect_sensitive_data("console.log(user.hash);")
        assert result.risk_level is RiskLevel.LOW
        assert result.patterns == ["Hash/Checksum"]

    def test_high_match_raises_medium(self):
        medium = detect_sensitive_data("console.log(email);")
        both = detect_sensitive_data("console.log(email, password);")
        assert medium.risk_level is RiskLevel.MEDIUM
        assert both.risk_level is RiskLevel.HIGH
        assert {"Email", "Password"} <= set(both.patterns)

    def test_every_match_is_reported(self):
        result = detect_sensitive_data("console.log(email, user.hash);")
        assert result.risk_level is RiskLevel.MEDIUM
        assert "Email" in result.patterns
        assert "Hash/Checksum" in result.patterns


class TestLiteralAndNaming:
    def test_jwt_literal(self):
        result = detect_sensitive_data(f'console.log("{JWT}");')
        assert result.risk_level is RiskLevel.HIGH
        assert "JWT Token Value" in result.patterns

    def test_uuid_literal(self):
        result = detect_sensitive_data('console.log("id", "123e4567-e89b-12d3-a456-426614174000");')
        assert result.risk_level is RiskLevel.HIGH
        assert "UUID" in result.patterns

    def test_sensitive_property_is_at_least_medium(self):
        result = detect_sensitive_data("console.log(config.authHeader);")
        assert result.risk_level is RiskLevel.MEDIUM
        assert "Sensitive Object Property" in result.patterns

    def test_destructured_property(self):
        result = detect_sensitive_data("console.log({ tokenValue });")
        assert RiskLevel.MEDIUM <= result.risk_level


class TestArgumentCapture:
    def test_extract(self):
        assert extract_arguments('console.log("a", b);') == '"a", b'

    def test_empty_argument_list(self):
        assert extract_arguments("console.log();") is None
        assert detect_sensitive_data("console.log();").risk_level is RiskLevel.NONE

    def test_capture_stops_at_first_close_paren(self):
        # Nested calls truncate the captured arguments
        result = detect_sensitive_data("console.log(format(x), password);")
        assert result.risk_level is RiskLevel.NONE

    def test_column_selects_call(self):
        line = 'console.log("ok"); console.log(password);'
        assert detect_sensitive_data(line, 0).risk_level is RiskLevel.NONE
        second = line.index("console.log(password")
        assert detect_sensitive_data(line, second).risk_level is RiskLevel.HIGH
