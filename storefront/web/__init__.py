"""
Web package for the Storefront product listing.

Exports the application factory used by the CLI `serve` command and tests.
"""

from storefront.web.app import STORAGE_ERRORS, create_app

__all__ = ["STORAGE_ERRORS", "create_app"]
