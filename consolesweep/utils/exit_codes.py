"""Centralized exit codes for the consolesweep CLI."""


class ExitCodes:
    """Standard exit codes for consolesweep CLI commands."""

    SUCCESS = 0

    SENSITIVE_REMAINING = 1
    FILE_ERRORS = 2

    TASK_INCOMPLETE = 3

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success",
            cls.SENSITIVE_REMAINING: "Potentially sensitive console.log statements remain",
            cls.FILE_ERRORS: "One or more files could not be processed",
            cls.TASK_INCOMPLETE: "Task could not be completed due to missing prerequisites",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")

    @classmethod
    def should_fail_pipeline(cls, code: int) -> bool:
        """Determine if an exit code should fail a CI/CD pipeline."""

        return code != cls.SUCCESS
