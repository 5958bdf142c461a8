from .row_name_routes import router as row_name_router
from .style_routes import router as style_router

__all__ = ["row_name_router", "style_router"]
