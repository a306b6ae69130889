"""Job aggregation."""

from talentpool.aggregation.service import JobAggregationService

__all__ = ["JobAggregationService"]
