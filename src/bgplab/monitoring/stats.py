"""Statistics tracking for validator outcomes."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

import structlog

from bgplab.protocol.types import ErrorCode

logger = structlog.get_logger(__name__)


@dataclass
class ValidationStats:
    """Outcome counters for a single validator."""

    validator: str
    attempts: int = 0
    accepted: int = 0
    rejected: int = 0
    rejections: Counter[str] = field(default_factory=Counter)
    last_update: datetime = field(default_factory=datetime.utcnow)

    def record_accepted(self) -> None:
        """Count a successful validation."""
        self.attempts += 1
        self.accepted += 1
        self.last_update = datetime.utcnow()

    def record_rejected(self, code: ErrorCode) -> None:
        """
        Count a failed validation.

        Args:
            code: First failing check
        """
        self.attempts += 1
        self.rejected += 1
        self.rejections[code.value] += 1
        self.last_update = datetime.utcnow()

    def reset(self) -> None:
        """Reset all counters."""
        self.attempts = 0
        self.accepted = 0
        self.rejected = 0
        self.rejections.clear()
        self.last_update = datetime.utcnow()


class StatisticsCollector:
    """Collect and report outcome statistics for all validators."""

    def __init__(self) -> None:
        """Initialize statistics collector."""
        self._stats: dict[str, ValidationStats] = {}

    def get_stats(self, validator: str) -> ValidationStats:
        """
        Get statistics for a validator (creates if doesn't exist).

        Args:
            validator: Validator name

        Returns:
            ValidationStats for the validator
        """
        if validator not in self._stats:
            self._stats[validator] = ValidationStats(validator=validator)
        return self._stats[validator]

    def record(self, validator: str, error_code: ErrorCode | None) -> None:
        """
        Record one validator outcome.

        Args:
            validator: Validator name
            error_code: Failing check, or None on success
        """
        stats = self.get_stats(validator)
        if error_code is None:
            stats.record_accepted()
        else:
            stats.record_rejected(error_code)

    def reset(self) -> None:
        """Drop all statistics."""
        self._stats.clear()

    def log_summary(self) -> None:
        """Log one summary line per validator with activity."""
        for validator, stats in self._stats.items():
            if stats.attempts == 0:
                continue
            logger.info(
                "validation_stats",
                validator=validator,
                attempts=stats.attempts,
                accepted=stats.accepted,
                rejected=stats.rejected,
                rejections=dict(stats.rejections),
            )
