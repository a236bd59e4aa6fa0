"""Canonical engine error type.

Only caller bugs raise. Missing or malformed activity data never does; it
degrades to the next fallback instead.

Standard error codes:
- INVALID_WINDOW: Window length is negative
- REFERENCE_BEFORE_HISTORY: Reference date precedes every activity
- LOAD_COUNT_MISMATCH: Activities and load results are not paired one-to-one
- NON_CONTIGUOUS_SERIES: Daily points have gaps, duplicates or are out of order
"""

INVALID_WINDOW = "INVALID_WINDOW"
REFERENCE_BEFORE_HISTORY = "REFERENCE_BEFORE_HISTORY"
LOAD_COUNT_MISMATCH = "LOAD_COUNT_MISMATCH"
NON_CONTIGUOUS_SERIES = "NON_CONTIGUOUS_SERIES"


class EngineContractError(ValueError):
    """Raised when a caller violates an engine contract.

    Attributes:
        code: Error code (e.g., "INVALID_WINDOW", "NON_CONTIGUOUS_SERIES")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")
