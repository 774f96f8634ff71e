"""Domain layer for bizledger application.

Services live in their own modules (``bizledger.domain.invoice``,
``bizledger.domain.sales_import``, ...) and are imported from there.
"""
