"""welfaretrack - staff, customer and work-record tracking API."""

__version__ = "0.1.0"
