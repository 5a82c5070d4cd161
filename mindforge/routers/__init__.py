"""API routers."""

from mindforge.routers.auth import router as auth_router
from mindforge.routers.bootcamps import router as bootcamps_router
from mindforge.routers.communications import router as communications_router
from mindforge.routers.discussions import router as discussions_router
from mindforge.routers.health import router as health_router
from mindforge.routers.knowledge_streams import router as knowledge_streams_router
from mindforge.routers.progress import router as progress_router
from mindforge.routers.sessions import router as sessions_router
from mindforge.routers.users import router as users_router

__all__ = [
    "auth_router",
    "bootcamps_router",
    "communications_router",
    "discussions_router",
    "health_router",
    "knowledge_streams_router",
    "progress_router",
    "sessions_router",
    "users_router",
]
