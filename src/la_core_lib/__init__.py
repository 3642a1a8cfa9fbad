"""Legal-Aid Core Library

Case progress scoring and timeline synthesis for the legal-aid case
management services.
"""

__version__ = "0.1.0"

from la_core_lib.models import (
    ServiceType, CaseCategory, RecordStatus, ServiceRecord,
    ProgressResult, SkippedRecord, MalformedReason,
    TimelineStatus, TimelineEvent, TimelineBranch, MergePoint, TimelineTraffic,
    CaseProgressReport, PortfolioSummary,
)

from la_core_lib.catalog import (
    CatalogEntry,
    ServiceCatalog,
    load_service_catalog,
    get_service_catalog,
    reset_service_catalog,
)

from la_core_lib.exceptions import (
    CaseProgressError,
    UnknownCategoryError,
    UnknownServiceTypeError,
    CatalogConfigurationError,
)

from la_core_lib.engine import (
    CaseProgressEngine,
    compute_case_progress,
    summarize_reports,
)

__all__ = [
    # Models
    "ServiceType", "CaseCategory", "RecordStatus", "ServiceRecord",
    "ProgressResult", "SkippedRecord", "MalformedReason",
    "TimelineStatus", "TimelineEvent", "TimelineBranch", "MergePoint", "TimelineTraffic",
    "CaseProgressReport", "PortfolioSummary",
    # Catalog
    "CatalogEntry",
    "ServiceCatalog",
    "load_service_catalog",
    "get_service_catalog",
    "reset_service_catalog",
    # Errors
    "CaseProgressError",
    "UnknownCategoryError",
    "UnknownServiceTypeError",
    "CatalogConfigurationError",
    # Engine
    "CaseProgressEngine",
    "compute_case_progress",
    "summarize_reports",
]
