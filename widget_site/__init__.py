"""Two custom selects and a running-total table, served as a static site."""

from widget_site.models import AggregationTable, Dropdown, Site, TableRow, default_site

__version__ = "0.1.0"

__all__ = ["AggregationTable", "Dropdown", "Site", "TableRow", "default_site"]
