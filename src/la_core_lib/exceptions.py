"""Exceptions raised by the case progress engine.

Only configuration problems are raised. Malformed service records are not
errors: they are skipped and reported as SkippedRecord diagnostics.
"""


class CaseProgressError(Exception):
    """Base class for engine errors"""


class UnknownCategoryError(CaseProgressError):
    """Case category is not present in the service catalog.

    A configuration bug, not a user error; callers should surface it as a
    server-side failure.
    """

    def __init__(self, category):
        self.category = category
        super().__init__(f"Unknown case category: {category!r}")


class UnknownServiceTypeError(CaseProgressError, KeyError):
    """Service type has no weight in the catalog"""

    def __init__(self, service_type):
        self.service_type = service_type
        super().__init__(f"No weight configured for service type: {service_type!r}")

    def __str__(self) -> str:
        return self.args[0]


class CatalogConfigurationError(CaseProgressError):
    """Service catalog configuration is unreadable or inconsistent"""
