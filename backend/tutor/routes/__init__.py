from .progress import router as progress_router
from .gamification import router as gamification_router
from .usage import router as usage_router
from .navigation import router as navigation_router

# Re-export routers with consistent naming
progress = progress_router
gamification = gamification_router
usage = usage_router
navigation = navigation_router
