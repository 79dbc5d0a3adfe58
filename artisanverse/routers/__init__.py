"""
FastAPI routers grouped by domain (products, artisans, stats).

Each file inside this package exposes an APIRouter that is included in the
main application (app.py).
"""
