# sales_dashboard/errors.py


class SalesDashboardError(Exception):
    """Base class for failures raised by the dashboard."""


class FetchError(SalesDashboardError):
    """The seed source could not be read or returned an invalid payload."""


class StoreError(SalesDashboardError):
    """A query, aggregate, delete or insert against the data store failed."""


class InitializationError(SalesDashboardError):
    """Reseeding the data store failed."""
