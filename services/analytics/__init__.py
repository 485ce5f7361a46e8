from services.analytics.aggregator import TOP_N, aggregate, filter_by_range, summarize

__all__ = ["TOP_N", "aggregate", "filter_by_range", "summarize"]
