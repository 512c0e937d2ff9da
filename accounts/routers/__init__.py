"""
FastAPI routers. Each module exposes an APIRouter included by accounts.app.
"""
