"""v1 contract schemas and core adapters."""

__version__ = "1.0.0"

from .adapters import (
    adapt_consolidate_request,
    adapt_report_to_response,
    report_to_contract,
)
from .schemas import (
    AgreementMatrixContract,
    AnalyzerOutputContract,
    ConsolidateOptions,
    ConsolidateRequest,
    ConsolidateResponse,
    FindingContract,
    FindingGroupContract,
    LocationContract,
    MetaContract,
    NormalizationErrorContract,
    ProjectContextContract,
    ReportContract,
    ResolutionContract,
)

__all__ = [
    "__version__",
    "AgreementMatrixContract",
    "AnalyzerOutputContract",
    "ConsolidateOptions",
    "ConsolidateRequest",
    "ConsolidateResponse",
    "FindingContract",
    "FindingGroupContract",
    "LocationContract",
    "MetaContract",
    "NormalizationErrorContract",
    "ProjectContextContract",
    "ReportContract",
    "ResolutionContract",
    "adapt_consolidate_request",
    "adapt_report_to_response",
    "report_to_contract",
]
