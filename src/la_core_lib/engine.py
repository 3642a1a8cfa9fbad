"""Case Progress Engine - the single entry point for collaborators.

compute_case_progress() runs the progress calculator and then the timeline
synthesizer on the same record snapshot. It performs no I/O and holds no
state between calls, so concurrent requests need no locking.

Example:
    ```python
    from la_core_lib import compute_case_progress

    report = compute_case_progress("FAMILY", records)
    if report.ready_for_review:
        notify_case_ready(case_id)          # caller's notification dispatcher
    return report.to_payload()              # camelCase dict for the client
    ```
"""

import logging
from typing import Iterable, Optional, Union

from la_core_lib.catalog.service_catalog import ServiceCatalog, get_service_catalog
from la_core_lib.core.progress.progress_calculator import ProgressCalculator
from la_core_lib.core.timeline.timeline_synthesizer import TimelineSynthesizer
from la_core_lib.models.common import round_half_up
from la_core_lib.models.report import CaseProgressReport, PortfolioSummary
from la_core_lib.models.services import CaseCategory, ServiceRecord

logger = logging.getLogger(__name__)


class CaseProgressEngine:
    """Progress calculator and timeline synthesizer bound to one catalog.

    Args:
        catalog: Service catalog to score against (default: process-wide catalog)
    """

    def __init__(self, catalog: Optional[ServiceCatalog] = None):
        self.catalog = catalog if catalog is not None else get_service_catalog()
        self._calculator = ProgressCalculator(self.catalog)
        self._synthesizer = TimelineSynthesizer(self.catalog)

    def compute(
        self,
        category: Union[CaseCategory, str],
        service_records: Iterable[ServiceRecord],
    ) -> CaseProgressReport:
        """Compute progress and timeline for one case.

        Args:
            category: Case category
            service_records: The case's service records (any order)

        Returns:
            CaseProgressReport

        Raises:
            UnknownCategoryError: If the category is not in the catalog
        """
        resolved = self.catalog.resolve_category(category)
        snapshot = list(service_records)

        outcome = self._calculator.calculate(resolved, snapshot)
        timeline = self._synthesizer.synthesize(resolved, snapshot, outcome.result)

        return CaseProgressReport(
            category=resolved,
            progress=outcome.result,
            timeline=timeline,
            skipped=[item.service_type for item in outcome.skipped],
            skipped_records=outcome.skipped,
            out_of_catalog=outcome.out_of_catalog,
        )


def compute_case_progress(
    category: Union[CaseCategory, str],
    service_records: Iterable[ServiceRecord],
    catalog: Optional[ServiceCatalog] = None,
) -> CaseProgressReport:
    """Compute a case's weighted progress and branching timeline.

    Args:
        category: Case category
        service_records: The case's service records (any order)
        catalog: Alternate catalog (default: process-wide catalog)

    Returns:
        CaseProgressReport with progress, timeline and skipped diagnostics

    Raises:
        UnknownCategoryError: If the category is not in the catalog
    """
    return CaseProgressEngine(catalog).compute(category, service_records)


def summarize_reports(reports: Iterable[CaseProgressReport]) -> PortfolioSummary:
    """Aggregate several cases' reports (e.g. one client's dashboard)."""
    reports = list(reports)
    if not reports:
        return PortfolioSummary()

    total = sum(report.progress.total_progress for report in reports)
    return PortfolioSummary(
        total_cases=len(reports),
        ready_for_review=sum(1 for report in reports if report.ready_for_review),
        average_progress=round_half_up(total / len(reports)),
    )
