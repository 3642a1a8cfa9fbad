"""Built-in service catalog data.

Plain data only; ServiceCatalog.default() turns it into a validated,
immutable catalog object. Weights are relative: a category's progress is
the completed share of its required services' total weight.
"""

from la_core_lib.models.services import CaseCategory, ServiceType

DEFAULT_SERVICE_WEIGHTS = {
    ServiceType.CONSULTATION: 15,
    ServiceType.DOCUMENT_PREPARATION: 20,
    ServiceType.COURT_APPEARANCE: 25,
    ServiceType.RESEARCH: 10,
    ServiceType.COMMUNITY_OUTREACH: 5,
    ServiceType.MEDIATION: 20,
    ServiceType.CLIENT_MEETING: 10,
    ServiceType.CASE_REVIEW: 10,
}

# category -> (required, optional), in display order
DEFAULT_CATEGORY_RULES = {
    CaseCategory.FAMILY: (
        [ServiceType.CONSULTATION, ServiceType.DOCUMENT_PREPARATION, ServiceType.MEDIATION],
        [ServiceType.RESEARCH, ServiceType.CLIENT_MEETING, ServiceType.CASE_REVIEW,
         ServiceType.COURT_APPEARANCE],
    ),
    CaseCategory.CRIMINAL: (
        [ServiceType.CONSULTATION, ServiceType.RESEARCH, ServiceType.DOCUMENT_PREPARATION,
         ServiceType.COURT_APPEARANCE],
        [ServiceType.CLIENT_MEETING, ServiceType.CASE_REVIEW],
    ),
    CaseCategory.CIVIL: (
        [ServiceType.CONSULTATION, ServiceType.DOCUMENT_PREPARATION, ServiceType.COURT_APPEARANCE],
        [ServiceType.MEDIATION, ServiceType.RESEARCH, ServiceType.CLIENT_MEETING],
    ),
    CaseCategory.PROPERTY: (
        [ServiceType.CONSULTATION, ServiceType.RESEARCH, ServiceType.DOCUMENT_PREPARATION],
        [ServiceType.MEDIATION, ServiceType.COURT_APPEARANCE, ServiceType.CASE_REVIEW],
    ),
    CaseCategory.LABOR: (
        [ServiceType.CONSULTATION, ServiceType.DOCUMENT_PREPARATION, ServiceType.MEDIATION],
        [ServiceType.COURT_APPEARANCE, ServiceType.COMMUNITY_OUTREACH, ServiceType.CLIENT_MEETING],
    ),
    CaseCategory.COMMERCIAL: (
        [ServiceType.CONSULTATION, ServiceType.RESEARCH, ServiceType.DOCUMENT_PREPARATION,
         ServiceType.CASE_REVIEW],
        [ServiceType.MEDIATION, ServiceType.COURT_APPEARANCE, ServiceType.CLIENT_MEETING],
    ),
    CaseCategory.ADMINISTRATIVE: (
        [ServiceType.CONSULTATION, ServiceType.DOCUMENT_PREPARATION],
        [ServiceType.RESEARCH, ServiceType.CASE_REVIEW, ServiceType.CLIENT_MEETING],
    ),
    CaseCategory.CONSTITUTIONAL: (
        [ServiceType.CONSULTATION, ServiceType.RESEARCH, ServiceType.DOCUMENT_PREPARATION,
         ServiceType.COURT_APPEARANCE],
        [ServiceType.COMMUNITY_OUTREACH, ServiceType.CASE_REVIEW],
    ),
    CaseCategory.OTHER: (
        [ServiceType.CONSULTATION],
        [ServiceType.DOCUMENT_PREPARATION, ServiceType.RESEARCH, ServiceType.CLIENT_MEETING,
         ServiceType.CASE_REVIEW, ServiceType.MEDIATION, ServiceType.COMMUNITY_OUTREACH],
    ),
}
