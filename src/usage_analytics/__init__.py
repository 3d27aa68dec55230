"""Usage analytics - daily series and period summaries for the prompt scoring API."""

from usage_analytics._version import __version__
from usage_analytics.aggregation import (
    AggregationReport,
    DailySeriesAggregator,
    aggregate,
)
from usage_analytics.categories import (
    DEFAULT_CATEGORY_MAP,
    CategoryMap,
    EndpointCategory,
    normalize_endpoint,
)
from usage_analytics.dashboard import DashboardService, DashboardSnapshot
from usage_analytics.errors import (
    AggregationInputError,
    DataSourceError,
    InvalidWindowError,
    MalformedRecordError,
    UsageAnalyticsError,
)
from usage_analytics.models import (
    CategorySlot,
    DailySeriesPoint,
    DetailTotals,
    PeriodSummary,
    UsageRecord,
)
from usage_analytics.policies import (
    ResponseTimePolicy,
    get_response_time_policy,
    running_mean,
    weighted_mean,
)
from usage_analytics.records import coerce_record
from usage_analytics.sources import (
    HttpUsageSource,
    JsonFileUsageSource,
    StaticUsageSource,
    UsageDataSource,
    UsageWindow,
    validate_window,
)
from usage_analytics.summary import (
    improvement_success_rate_percent,
    success_rate_percent,
    summarize,
)
from usage_analytics.views import MetricPoint, SeriesMetric, chart_rows, metric_series

__all__ = [
    "AggregationInputError",
    "AggregationReport",
    "CategoryMap",
    "CategorySlot",
    "DEFAULT_CATEGORY_MAP",
    "DailySeriesAggregator",
    "DailySeriesPoint",
    "DashboardService",
    "DashboardSnapshot",
    "DataSourceError",
    "DetailTotals",
    "EndpointCategory",
    "HttpUsageSource",
    "InvalidWindowError",
    "JsonFileUsageSource",
    "MalformedRecordError",
    "MetricPoint",
    "PeriodSummary",
    "ResponseTimePolicy",
    "SeriesMetric",
    "StaticUsageSource",
    "UsageAnalyticsError",
    "UsageDataSource",
    "UsageRecord",
    "UsageWindow",
    "__version__",
    "aggregate",
    "chart_rows",
    "coerce_record",
    "get_response_time_policy",
    "improvement_success_rate_percent",
    "metric_series",
    "normalize_endpoint",
    "running_mean",
    "success_rate_percent",
    "summarize",
    "validate_window",
    "weighted_mean",
]
