"""Clients for external services."""

from bizledger.clients.sales_api import SalesAPIClient, SalesAPIError, build_sale_payload

__all__ = ["SalesAPIClient", "SalesAPIError", "build_sale_payload"]
