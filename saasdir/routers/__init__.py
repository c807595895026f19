"""
FastAPI routers grouped by area (pages, submit, likes, auth, seo).

Each module exposes an APIRouter that app.py includes. The admin moderation
screens live in admin_app.py as a separate application.
"""
