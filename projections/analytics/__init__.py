"""
Manara Projections - Analytics Read Model
===========================================
Dashboard and report metrics folded from the Transaction Log and
the product registry. Pure: same log and filters, same figures.
"""

from projections.analytics.dashboard import (
    DashboardSummary,
    EntityActivity,
    LowStockAlert,
    dashboard_summary,
    low_stock_alerts,
    top_entities,
)
from projections.analytics.filters import ReportFilters, filter_transactions
from projections.analytics.reports import (
    CustomerProfit,
    ProductProfit,
    ProfitabilityReport,
    profitability_report,
    sale_cogs,
)

__all__ = [
    "CustomerProfit",
    "DashboardSummary",
    "EntityActivity",
    "LowStockAlert",
    "ProductProfit",
    "ProfitabilityReport",
    "ReportFilters",
    "dashboard_summary",
    "filter_transactions",
    "low_stock_alerts",
    "profitability_report",
    "sale_cogs",
    "top_entities",
]
