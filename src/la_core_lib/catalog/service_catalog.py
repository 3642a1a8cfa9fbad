"""Service Catalog - category rules and service weights.

Static configuration consumed by the progress calculator and the timeline
synthesizer. A catalog is an immutable object that is built once and passed
by reference, so tests and tenants can supply alternate catalogs without
touching shared state.

Environment Variables:
    LA_SERVICE_CATALOG_PATH: JSON catalog file (default: built-in table)
    LA_CATALOG_LOAD_ATTEMPTS: Attempts for reading that file (default: 3)

Catalog file format:
    ```json
    {
      "weights": {"CONSULTATION": 15, "MEDIATION": 20},
      "categories": {
        "FAMILY": {"required": ["CONSULTATION"], "optional": ["MEDIATION"]}
      }
    }
    ```
"""

import json
import logging
import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator, model_validator

from la_core_lib.catalog.defaults import DEFAULT_CATEGORY_RULES, DEFAULT_SERVICE_WEIGHTS
from la_core_lib.exceptions import (
    CatalogConfigurationError,
    UnknownCategoryError,
    UnknownServiceTypeError,
)
from la_core_lib.models.common import EngineModel
from la_core_lib.models.services import CaseCategory, ServiceType
from la_core_lib.utils.resilience import call_with_retry

load_dotenv()

logger = logging.getLogger(__name__)


class CatalogEntry(EngineModel):
    """Per-category rule: which services are required vs optional"""

    required: Tuple[ServiceType, ...] = Field(
        default=(),
        description="Services counted toward the completion percentage, in display order"
    )

    optional: Tuple[ServiceType, ...] = Field(
        default=(),
        description="Services reported as bonus credit, in display order"
    )

    @model_validator(mode='after')
    def validate_service_sets(self):
        """Ensure no duplicates and no service is both required and optional"""
        for name, services in (("required", self.required), ("optional", self.optional)):
            if len(set(services)) != len(services):
                raise ValueError(f"Duplicate service types in {name}: {list(services)}")

        overlap = set(self.required) & set(self.optional)
        if overlap:
            raise ValueError(
                f"Service types cannot be both required and optional: {sorted(s.value for s in overlap)}"
            )
        return self

    @property
    def services(self) -> Tuple[ServiceType, ...]:
        """Required then optional services"""
        return self.required + self.optional

    def classify(self, service_type: ServiceType) -> Optional[str]:
        """Return 'required', 'optional', or None when not configured"""
        if service_type in self.required:
            return "required"
        if service_type in self.optional:
            return "optional"
        return None


class ServiceCatalog(EngineModel):
    """
    Rule table for every case category plus the shared weight table.

    Example:
        ```python
        catalog = ServiceCatalog.default()
        entry = catalog.required_and_optional(CaseCategory.FAMILY)
        catalog.weight_of(ServiceType.MEDIATION)  # 20.0
        ```
    """

    categories: Mapping[CaseCategory, CatalogEntry] = Field(
        description="Category -> required/optional rule (read-only)"
    )

    weights: Mapping[ServiceType, float] = Field(
        description="Service type -> relative contribution to progress (read-only)"
    )

    @field_validator('weights')
    @classmethod
    def weights_positive(cls, v):
        """Every weight must be strictly positive"""
        bad = {k.value: w for k, w in v.items() if w <= 0}
        if bad:
            raise ValueError(f"Service weights must be positive: {bad}")
        return MappingProxyType(dict(v))

    @field_validator('categories')
    @classmethod
    def freeze_categories(cls, v):
        """Store the rule table as a read-only mapping"""
        return MappingProxyType(dict(v))

    @model_validator(mode='after')
    def every_service_weighted(self):
        """Every service named by a category rule needs a weight"""
        missing = sorted({
            service.value
            for entry in self.categories.values()
            for service in entry.services
            if service not in self.weights
        })
        if missing:
            raise ValueError(f"Missing weights for service types: {missing}")
        return self

    # ============================================================
    # Lookups
    # ============================================================

    def required_and_optional(self, category: Union[CaseCategory, str]) -> CatalogEntry:
        """Get the rule for a category.

        Args:
            category: CaseCategory or its name (case-insensitive)

        Returns:
            CatalogEntry for the category

        Raises:
            UnknownCategoryError: If the category is unknown or not configured
        """
        resolved = self.resolve_category(category)
        entry = self.categories.get(resolved)
        if entry is None:
            raise UnknownCategoryError(category)
        return entry

    def resolve_category(self, category: Union[CaseCategory, str]) -> CaseCategory:
        """Convert a category name to CaseCategory, raising UnknownCategoryError"""
        if isinstance(category, CaseCategory):
            return category
        try:
            return CaseCategory(category)
        except ValueError:
            raise UnknownCategoryError(category) from None

    def weight_of(self, service_type: ServiceType) -> float:
        """Get the relative weight of a service type.

        Raises:
            UnknownServiceTypeError: If no weight is configured
        """
        try:
            return float(self.weights[service_type])
        except KeyError:
            raise UnknownServiceTypeError(service_type) from None

    # ============================================================
    # Construction
    # ============================================================

    @classmethod
    def default(cls) -> "ServiceCatalog":
        """Build the catalog from the built-in rule table"""
        return cls(
            categories={
                category: CatalogEntry(required=tuple(required), optional=tuple(optional))
                for category, (required, optional) in DEFAULT_CATEGORY_RULES.items()
            },
            weights=dict(DEFAULT_SERVICE_WEIGHTS),
        )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ServiceCatalog":
        """Build a catalog from plain data (e.g. parsed JSON).

        Raises:
            CatalogConfigurationError: If the data does not describe a valid catalog
        """
        try:
            return cls.model_validate(dict(data))
        except (ValidationError, TypeError, ValueError) as e:
            raise CatalogConfigurationError(f"Invalid service catalog: {e}") from e

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "ServiceCatalog":
        """Read a catalog from a JSON file.

        Raises:
            OSError: If the file cannot be read (retryable)
            CatalogConfigurationError: If the content is not a valid catalog
        """
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise CatalogConfigurationError(f"Catalog file {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise CatalogConfigurationError(f"Catalog file {path} must contain a JSON object")

        return cls.from_mapping(data)


def load_service_catalog(path: Union[str, Path], max_attempts: int = 3) -> ServiceCatalog:
    """Read a catalog file, retrying transient read failures.

    Args:
        path: JSON catalog file
        max_attempts: Attempts before giving up on an unreadable file

    Returns:
        Loaded ServiceCatalog

    Raises:
        CatalogConfigurationError: If the file stays unreadable or is invalid
    """
    try:
        catalog = call_with_retry(ServiceCatalog.from_json_file, path, max_attempts=max_attempts)
    except OSError as e:
        raise CatalogConfigurationError(f"Cannot read service catalog {path}: {e}") from e

    logger.info(
        f"Service catalog loaded from {path}: "
        f"categories={len(catalog.categories)}, services={len(catalog.weights)}"
    )
    return catalog


# Process-wide default, built lazily from the environment
_catalog_instance: Optional[ServiceCatalog] = None


def get_service_catalog() -> ServiceCatalog:
    """Get or create the process-wide ServiceCatalog.

    Uses LA_SERVICE_CATALOG_PATH when set, otherwise the built-in table.
    Callers that need a different catalog should pass one explicitly
    instead of replacing this instance.

    Returns:
        Shared ServiceCatalog
    """
    global _catalog_instance

    if _catalog_instance is None:
        path = os.getenv("LA_SERVICE_CATALOG_PATH")
        if path:
            attempts_str = os.getenv("LA_CATALOG_LOAD_ATTEMPTS", "3")
            try:
                attempts = int(attempts_str)
            except ValueError:
                logger.warning(f"Invalid LA_CATALOG_LOAD_ATTEMPTS '{attempts_str}', defaulting to 3")
                attempts = 3
            _catalog_instance = load_service_catalog(path, max_attempts=attempts)
        else:
            _catalog_instance = ServiceCatalog.default()
            logger.info(
                f"Service catalog initialized from built-in table: "
                f"categories={len(_catalog_instance.categories)}"
            )

    return _catalog_instance


def reset_service_catalog():
    """Reset the process-wide ServiceCatalog.

    Used for testing or reconfiguration.
    """
    global _catalog_instance
    _catalog_instance = None
    logger.warning("ServiceCatalog instance reset")
