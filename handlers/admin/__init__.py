from .events import router as events_router
from .export import router as export_router
from .locations import router as locations_router
from .menu import router as menu_router
from .moderation import router as moderation_router

routers = [menu_router, locations_router, events_router, moderation_router, export_router]
