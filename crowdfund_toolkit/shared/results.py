"""
Result types for explicit success/skip/failure tracking in reconciliation.

Each campaign processed during a reconciliation pass produces a tagged
Result instead of raising, so one failing campaign never aborts its
concurrent siblings. Results are merged afterwards into a
ReconciliationSummary.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class ErrorSeverity(Enum):
    """Severity levels for processing errors."""

    WARNING = "warning"  # Continue processing, log issue
    ERROR = "error"  # Skip this item, continue others


@dataclass
class ProcessingError:
    """
    Represents a single processing error with context.

    Attributes:
        source: Component that generated the error (e.g., "reconciler")
        message: Human-readable error description
        severity: How severe the error is (affects control flow)
        context: Additional context like campaign_id
        exception: Original exception if available
    """

    source: str
    message: str
    severity: ErrorSeverity
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[Exception] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "source": self.source,
            "message": self.message,
            "severity": self.severity.value,
            "context": self.context,
        }


@dataclass
class Result(Generic[T]):
    """
    Tagged outcome of one unit of work.

    Attributes:
        success: Whether the operation succeeded
        data: The result data if successful
        skipped: True when the item was intentionally left out
        errors: List of errors encountered (can have warnings on success)
    """

    success: bool
    data: Optional[T] = None
    skipped: bool = False
    errors: List[ProcessingError] = field(default_factory=list)

    @classmethod
    def ok(cls, data: T) -> "Result[T]":
        """Create a successful result with data."""
        return cls(success=True, data=data)

    @classmethod
    def skip(cls) -> "Result[T]":
        """Create a result for an item that yields nothing."""
        return cls(success=True, skipped=True)

    @classmethod
    def fail_with_message(
        cls,
        source: str,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
        exception: Optional[Exception] = None,
    ) -> "Result[T]":
        """Create a failed result with a message (convenience method)."""
        error = ProcessingError(
            source=source,
            message=message,
            severity=severity,
            context=context or {},
            exception=exception,
        )
        return cls(success=False, errors=[error])

    def add_warning(
        self,
        source: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> "Result[T]":
        """Add a warning to the result (convenience method)."""
        self.errors.append(
            ProcessingError(
                source=source,
                message=message,
                severity=ErrorSeverity.WARNING,
                context=context or {},
            )
        )
        return self

    def has_warnings(self) -> bool:
        """Check if result has any WARNING level errors."""
        return any(e.severity == ErrorSeverity.WARNING for e in self.errors)


@dataclass
class ReconciliationSummary:
    """
    Summary of one reconciliation pass.

    Dropped campaigns are excluded from the displayed set; their errors
    stay here for diagnostics.
    """

    total: int = 0
    active: int = 0
    skipped_inactive: int = 0
    degraded: int = 0
    dropped: int = 0

    errors: List[ProcessingError] = field(default_factory=list)

    def add_result(self, result: Result) -> None:
        """Account for one per-campaign result."""
        self.total += 1
        if result.skipped:
            self.skipped_inactive += 1
        elif result.success:
            self.active += 1
        else:
            self.dropped += 1
        self.errors.extend(result.errors)
        if result.success and result.has_warnings():
            self.degraded += 1

    def warning_count(self) -> int:
        """Count total warnings."""
        return sum(
            1 for e in self.errors if e.severity == ErrorSeverity.WARNING
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert summary to dictionary for JSON serialization."""
        return {
            "counts": {
                "total": self.total,
                "active": self.active,
                "skipped_inactive": self.skipped_inactive,
                "degraded": self.degraded,
                "dropped": self.dropped,
            },
            "warning_count": self.warning_count(),
            "errors": [e.to_dict() for e in self.errors],
        }
