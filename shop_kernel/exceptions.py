"""
Typed Exception Hierarchy for the Shop Kernel.

The profitability engines themselves raise nothing for typed inputs: missing
references resolve to neutral defaults and empty inputs yield zero metrics.
Everything that CAN fail lives at the edges (row coercion, configuration,
snapshot loading, report lookup) and raises one of the types below.

Every error carries a machine-readable ``code`` class attribute and keeps its
context as attributes, so callers catch by type and read structured data
instead of parsing messages.

    ShopKernelError (base)
    |
    +-- RecordError
    |   +-- RecordCoercionError
    |
    +-- MonthKeyError
    |   +-- InvalidMonthKeyError
    |
    +-- ReportError
    |   +-- ServiceNotFoundError
    |
    +-- SnapshotError
    |   +-- SnapshotLoadError
    |
    +-- ConfigError
        +-- InvalidConfigError

Category   | Code                   | When Raised
-----------|------------------------|------------------------------------------
Record     | RECORD_COERCION_FAILED | Store row cannot become a typed record
Month key  | INVALID_MONTH_KEY      | Month key is not "YYYY-MM"
Report     | SERVICE_NOT_FOUND      | Detail requested for an unknown service
Snapshot   | SNAPSHOT_LOAD_FAILED   | A record table could not be read
Config     | INVALID_CONFIG         | Configuration file fails validation
"""


class ShopKernelError(Exception):
    """
    Base exception for all shop kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "SHOP_KERNEL_ERROR"


# Record-related exceptions


class RecordError(ShopKernelError):
    """Base exception for record shape errors."""

    code: str = "RECORD_ERROR"


class RecordCoercionError(RecordError):
    """A raw store row could not be coerced into a typed record."""

    code: str = "RECORD_COERCION_FAILED"

    def __init__(
        self,
        kind: str,
        record_id: str | None,
        field: str,
        reason: str,
    ):
        self.kind = kind
        self.record_id = record_id
        self.field = field
        self.reason = reason
        super().__init__(
            f"Cannot coerce {kind} row {record_id!r}: field {field!r} {reason}"
        )


# Month key exceptions


class MonthKeyError(ShopKernelError):
    """Base exception for month key errors."""

    code: str = "MONTH_KEY_ERROR"


class InvalidMonthKeyError(MonthKeyError, ValueError):
    """Month key is not a valid "YYYY-MM" calendar month."""

    code: str = "INVALID_MONTH_KEY"

    def __init__(self, month_key: object):
        self.month_key = month_key
        super().__init__(f"Invalid month key: {month_key!r} (expected 'YYYY-MM')")


# Report exceptions


class ReportError(ShopKernelError):
    """Base exception for report generation errors."""

    code: str = "REPORT_ERROR"


class ServiceNotFoundError(ReportError):
    """Service with given ID is not in the snapshot."""

    code: str = "SERVICE_NOT_FOUND"

    def __init__(self, service_id: str):
        self.service_id = service_id
        super().__init__(f"Service not found: {service_id}")


# Snapshot exceptions


class SnapshotError(ShopKernelError):
    """Base exception for snapshot loading errors."""

    code: str = "SNAPSHOT_ERROR"


class SnapshotLoadError(SnapshotError):
    """A record table could not be read from the store."""

    code: str = "SNAPSHOT_LOAD_FAILED"

    def __init__(self, kind: str, reason: str):
        self.kind = kind
        self.reason = reason
        super().__init__(f"Failed to load {kind}: {reason}")


# Configuration exceptions


class ConfigError(ShopKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIG_ERROR"


class InvalidConfigError(ConfigError):
    """Configuration file is structurally or semantically invalid."""

    code: str = "INVALID_CONFIG"

    def __init__(self, source: str, errors: list[str]):
        self.source = source
        self.errors = errors
        super().__init__(
            f"Invalid configuration {source}: {'; '.join(errors)}"
        )
