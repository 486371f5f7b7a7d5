# FastAPI routers grouped under app.api.*
from . import bookings

__all__ = ["bookings"]
