"""Project-wide custom exception types.

Only static-configuration faults are exceptions. "Not enough responses" is an
ordinary state for a new shop and is signalled with ``None`` scores or the
:class:`~engagement.analysis.sentinels.InsufficientData` sentinel instead.
"""


class ConfigurationError(RuntimeError):
    """Raised when the scoring taxonomy or reference tables are malformed."""

    def __init__(self, message: str) -> None:  # noqa: D401 – simple constructor
        super().__init__(message)


class TaxonomyError(ConfigurationError):
    """Raised when the category→question mapping violates its invariants."""


class MissingBenchmarkError(ConfigurationError):
    """Raised when an industry benchmark table lacks a driver category."""

    def __init__(self, category: str, industry: str | None = None) -> None:
        where = f" for industry {industry}" if industry else ""
        super().__init__(f"Benchmark missing for category {category}{where}.")
        self.category = category
        self.industry = industry
