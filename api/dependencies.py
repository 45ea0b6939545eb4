from flask import current_app

from services import CatalogServices


def get_services() -> CatalogServices:
    """Services built by the app factory for the current app."""
    return current_app.extensions["catalog"]
