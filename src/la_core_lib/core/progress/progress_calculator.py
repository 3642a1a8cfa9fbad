"""Progress Calculator

Purpose: Classify a case's services and score weighted completion.

Algorithm:
1. Look up the category's CatalogEntry
2. Screen out malformed records (unknown service type, end before start)
3. Collect distinct service types of COMPLETED records within the catalog
4. remaining = required - completed (catalog order)
5. optional completed = completed & optional
6. total = round(100 * weight(completed & required) / weight(required))

Optional services never inflate the percentage; they are reported separately
as bonus credit. A category with no required services scores 100 once any
optional service is completed, else 0.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple, Union

from la_core_lib.catalog.service_catalog import CatalogEntry, ServiceCatalog
from la_core_lib.models.common import round_half_up
from la_core_lib.models.progress import MalformedReason, ProgressResult, SkippedRecord
from la_core_lib.models.services import CaseCategory, RecordStatus, ServiceRecord, ServiceType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressOutcome:
    """Calculator output: the result plus its diagnostics.

    Attributes:
        result: ProgressResult for the snapshot
        skipped: Malformed records, in input order
        out_of_catalog: Ids of well-formed records whose service type is not
            configured for the category
    """

    result: ProgressResult
    skipped: List[SkippedRecord] = field(default_factory=list)
    out_of_catalog: List[str] = field(default_factory=list)


def screen_records(records: Iterable[ServiceRecord]) -> Tuple[List[ServiceRecord], List[SkippedRecord]]:
    """Split records into well-formed records and malformed-record diagnostics.

    Input order is preserved in both lists. Nothing is logged here; callers
    decide how loudly to report.

    Args:
        records: Service records of one case

    Returns:
        (valid_records, skipped)
    """
    valid: List[ServiceRecord] = []
    skipped: List[SkippedRecord] = []

    for record in records:
        if not record.is_recognized:
            reason = MalformedReason.UNKNOWN_SERVICE_TYPE
        elif not record.has_valid_window:
            reason = MalformedReason.INVALID_TIME_WINDOW
        else:
            valid.append(record)
            continue

        skipped.append(SkippedRecord(
            record_id=record.id,
            service_type=record.raw_service_type,
            reason=reason,
        ))

    return valid, skipped


def weighted_percentage(catalog: ServiceCatalog, done: Iterable[ServiceType], total: Iterable[ServiceType]) -> float:
    """100 * sum of weights in ``done`` / sum of weights in ``total`` (0.0 when total is empty)"""
    total_weight = sum(catalog.weight_of(s) for s in total)
    if total_weight <= 0:
        return 0.0
    done_weight = sum(catalog.weight_of(s) for s in done)
    return 100.0 * done_weight / total_weight


class ProgressCalculator:
    """Weighted progress scoring against a service catalog.

    Usage:
        calculator = ProgressCalculator(ServiceCatalog.default())
        outcome = calculator.calculate(CaseCategory.FAMILY, records)
        outcome.result.total_progress
    """

    def __init__(self, catalog: ServiceCatalog):
        self.catalog = catalog

    def calculate(
        self,
        category: Union[CaseCategory, str],
        records: Iterable[ServiceRecord],
    ) -> ProgressOutcome:
        """Classify services and compute the weighted completion percentage.

        Args:
            category: Case category
            records: The case's service records (any order)

        Returns:
            ProgressOutcome with result and diagnostics

        Raises:
            UnknownCategoryError: If the category is not in the catalog
        """
        entry = self.catalog.required_and_optional(category)
        valid, skipped = screen_records(records)

        for item in skipped:
            logger.warning(
                f"Skipping malformed service record {item.record_id} "
                f"(service_type={item.service_type!r}, reason={item.reason.value})"
            )

        completed_types = set()
        out_of_catalog: List[str] = []
        for record in valid:
            if entry.classify(record.service_type) is None:
                out_of_catalog.append(record.id)
                continue
            if record.status == RecordStatus.COMPLETED:
                completed_types.add(record.service_type)

        if out_of_catalog:
            logger.warning(
                f"{len(out_of_catalog)} record(s) have service types not configured for "
                f"{self.catalog.resolve_category(category).value}: {out_of_catalog}"
            )

        result = self._classify(entry, completed_types)

        logger.debug(
            f"Progress calculated: total={result.total_progress}%, "
            f"completed={len(result.completed_services)}, "
            f"remaining={len(result.remaining_services)}, skipped={len(skipped)}"
        )

        return ProgressOutcome(result=result, skipped=skipped, out_of_catalog=out_of_catalog)

    def _classify(self, entry: CatalogEntry, completed_types: set) -> ProgressResult:
        completed = [s for s in entry.services if s in completed_types]
        remaining = [s for s in entry.required if s not in completed_types]
        optional_done = [s for s in entry.optional if s in completed_types]

        if entry.required:
            required_done = [s for s in entry.required if s in completed_types]
            total = round_half_up(weighted_percentage(self.catalog, required_done, entry.required))
        else:
            total = 100 if optional_done else 0

        return ProgressResult(
            total_progress=total,
            completed_services=completed,
            remaining_services=remaining,
            optional_services_completed=optional_done,
        )
