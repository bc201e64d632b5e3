"""HTTP API for welfaretrack."""

from welfaretrack.api.app import API_PREFIX, Services, build_services, create_app

__all__ = ["API_PREFIX", "Services", "build_services", "create_app"]
