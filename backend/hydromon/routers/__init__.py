from hydromon.routers.auth import router as auth_router
from hydromon.routers.users import router as users_router
from hydromon.routers.devices import router as devices_router
from hydromon.routers.telemetry import router as telemetry_router

__all__ = ["auth_router", "users_router", "devices_router", "telemetry_router"]
