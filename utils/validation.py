"""Input normalization and data validation utilities.

Provides reusable functions for:
- Reading caller-supplied years, limits and country keys
- Range checks on years and amounts
- Collecting data-quality issues found while importing a dataset
"""

from typing import List, Dict, Any, Optional, Tuple

from expenditure.errors import InvalidArgument

# Span of years recorded anywhere in the source data.
DATASET_FIRST_YEAR = 1948
DATASET_LAST_YEAR = 2023


# ── Caller input ──────────────────────────────────────────────────────────────

def parse_year(value: Any, name: str = "year",
               required: bool = False) -> Optional[int]:
    """Read a year from an int or digit string.

    Years outside the recorded span are accepted; they just match no data.

    Args:
        value: Raw value (None means "no bound" unless required).
        name: Parameter name used in the error message.
        required: Reject None instead of returning it.

    Returns:
        The year as int, or None.

    Raises:
        InvalidArgument: If the value cannot be read as an integer, or is
            missing while required.
    """
    if value is None:
        if required:
            raise InvalidArgument(f"{name} is required")
        return None
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}") from None


def parse_limit(value: Any) -> Optional[int]:
    """Read a result limit, treating anything unusable as unbounded.

    None, non-numeric, zero and negative values all return None.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        limit = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return limit if limit > 0 else None


def parse_country_key(value: Any) -> Tuple[Optional[int], Optional[str]]:
    """Split a country key into ``(country_id, name)`` candidates.

    An int is only an id.  An all-digit string is tried as an id first and
    then as a name, so a country whose name is all digits stays reachable.
    Names are matched exactly (case-sensitive), so no normalization is done.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return value, None
    name = str(value)
    if name.isdigit():
        return int(name), name
    return None, name


def is_valid_year(year: int) -> bool:
    """Check if year lies within the recorded span of the dataset."""
    return (isinstance(year, int) and not isinstance(year, bool)
            and DATASET_FIRST_YEAR <= year <= DATASET_LAST_YEAR)


def is_valid_amount(value: float) -> bool:
    """Check if value is a usable expenditure amount (non-negative number)."""
    if not isinstance(value, (int, float)):
        return False
    if isinstance(value, bool):  # bool is subclass of int
        return False
    return value >= 0


# ── Data-quality reporting ────────────────────────────────────────────────────

class ValidationIssue:
    """Represents a single validation issue found during checks."""

    def __init__(self, check_name: str, severity: str, detail: str,
                 sample: Optional[Any] = None, count: int = 1):
        """Initialize a validation issue.

        Args:
            check_name: Name of the check that found this issue
            severity: Issue severity ('error', 'warning', 'info')
            detail: Human-readable description of the issue
            sample: Example value that triggered the issue
            count: Number of affected rows/records
        """
        self.check_name = check_name
        self.severity = severity
        self.detail = detail
        self.sample = sample
        self.count = count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "check": self.check_name,
            "severity": self.severity,
            "detail": self.detail,
            "sample": str(self.sample) if self.sample else None,
            "count": self.count,
        }

    def __repr__(self) -> str:
        return (f"ValidationIssue(check={self.check_name}, severity={self.severity}, "
                f"count={self.count})")


class ValidationResult:
    """Collects and reports on validation check results."""

    def __init__(self):
        self.issues: List[ValidationIssue] = []
        self.passed_checks: List[str] = []
        self.failed_checks: List[str] = []

    def add_issue(self, check_name: str, severity: str, detail: str,
                  sample: Optional[Any] = None, count: int = 1) -> None:
        self.issues.append(ValidationIssue(check_name, severity, detail, sample, count))
        if check_name not in self.failed_checks:
            self.failed_checks.append(check_name)

    def mark_check_passed(self, check_name: str) -> None:
        self.passed_checks.append(check_name)

    def get_issues_by_severity(self, severity: str) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == severity]

    def error_count(self) -> int:
        return len(self.get_issues_by_severity("error"))

    def warning_count(self) -> int:
        return len(self.get_issues_by_severity("warning"))

    def is_valid(self) -> bool:
        """Check if validation passed (no errors)."""
        return self.error_count() == 0

    def summary_text(self) -> str:
        """Generate human-readable validation summary."""
        lines = [
            "Validation Summary:",
            f"  Passed Checks: {len(self.passed_checks)}",
            f"  Failed Checks: {len(self.failed_checks)}",
            f"  Issues: {len(self.issues)}",
            f"    - Errors: {self.error_count()}",
            f"    - Warnings: {self.warning_count()}",
        ]
        for issue in self.issues:
            lines.append(f"  [{issue.severity.upper()}] {issue.check_name}: {issue.detail}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed_checks": self.passed_checks,
            "failed_checks": self.failed_checks,
            "issues": [i.to_dict() for i in self.issues],
        }
