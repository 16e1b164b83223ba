"""Flask blueprint package for the invoice dashboard.

Blueprints are defined in the sibling modules (e.g., ``invoice_routes``) and
registered in :mod:`dashboard.__init__`. Access to every route is decided by
the request gate before the view runs, so views do not check the session.
"""
