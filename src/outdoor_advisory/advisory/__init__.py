"""Advisory service composing cache, matcher and classifier."""

from outdoor_advisory.advisory.service import AdvisoryOutcome, AdvisoryService

__all__ = [
    "AdvisoryService",
    "AdvisoryOutcome",
]
