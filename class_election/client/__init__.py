from .api import ApiError, ElectionClient
from .views import render_dashboard

__all__ = ["ApiError", "ElectionClient", "render_dashboard"]
