# main.py
"""
Recipe catalog API.

Read-only endpoints over the SQLite catalog filled by ``load_data.py``.
"""
import logging
import math
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipe_catalog.config import LOG_FORMAT, get_settings
from recipe_catalog.store import RecipeStore

settings = get_settings()

logging.basicConfig(level=logging.DEBUG if settings.debug else logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()

ENDPOINTS = {
    "GET /api/recipes": "Get all recipes (paginated)",
    "GET /api/recipes/search": "Search recipes with filters",
    "GET /api/recipes/{id}": "Get recipe by ID",
    "GET /api/stats": "Get API statistics",
    "GET /api/health": "Health check",
}
AVAILABLE_ENDPOINTS = ["/api", "/api/recipes", "/api/recipes/search", "/api/stats", "/api/health"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store once per process, close it on shutdown."""
    cfg = get_settings()
    store = RecipeStore(cfg.database_path)
    store.initialize()
    store.ping()
    app.state.store = store
    logger.info("Starting %s v%s (db: %s)", cfg.app_name, cfg.app_version, cfg.database_path)
    try:
        yield
    finally:
        store.close()
        logger.info("Store closed")


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

# Allow requests from the browser frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


# --- Helpers ---
def get_store(request: Request) -> RecipeStore:
    return request.app.state.store


def error_detail(exc: Exception, fallback: str = "Internal server error") -> str:
    return str(exc) if get_settings().is_development else fallback


def failure(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return failure(500, "Internal server error", error=error_detail(exc, "Something went wrong"))


@app.exception_handler(404)
async def not_found(request: Request, exc):
    return failure(404, "Endpoint not found", path=request.url.path, availableEndpoints=AVAILABLE_ENDPOINTS)


# --- Endpoints ---
@app.get("/")
def root():
    return {
        "success": True,
        "message": "Recipe Management System API",
        "version": settings.app_version,
        "status": "running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "endpoints": {
            "api": "/api",
            "recipes": "/api/recipes",
            "search": "/api/recipes/search",
            "stats": "/api/stats",
            "health": "/api/health",
        },
    }


@app.get("/api")
def api_index():
    return {"success": True, "message": "Recipe API", "version": settings.app_version, "endpoints": ENDPOINTS}


@app.get("/api/recipes")
def get_recipes(
    page: int = 1,
    limit: int = 10,
    sortBy: str = "rating",
    sortOrder: str = "DESC",
    store: RecipeStore = Depends(get_store),
):
    page = max(1, page)
    limit = min(max(1, limit), 100)
    rows, total = store.list_page(page, limit, sortBy, sortOrder)

    total_pages = math.ceil(total / limit)
    return {
        "success": True,
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
        "data": rows,
    }


@app.get("/api/recipes/search")
def search_recipes(
    title: Optional[str] = None,
    cuisine: Optional[str] = None,
    rating: Optional[str] = None,
    total_time: Optional[str] = None,
    calories: Optional[str] = None,
    q: Optional[str] = None,
    store: RecipeStore = Depends(get_store),
):
    filters = {
        "title": title,
        "cuisine": cuisine,
        "rating": rating,
        "total_time": total_time,
        "calories": calories,
        "q": q,
    }
    filters = {k: v for k, v in filters.items() if v}
    rows = store.search(**filters)
    return {"success": True, "filters": filters, "count": len(rows), "data": rows}


@app.get("/api/recipes/{recipe_id}")
def get_recipe(recipe_id: str, store: RecipeStore = Depends(get_store)):
    try:
        rid = int(recipe_id)
    except ValueError:
        return failure(400, "Valid recipe ID is required")

    recipe = store.get(rid)
    if recipe is None:
        return failure(404, "Recipe not found")
    return {"success": True, "data": recipe}


@app.get("/api/stats")
def get_stats(store: RecipeStore = Depends(get_store)):
    return {
        "success": True,
        "data": {
            "totalRecipes": store.count(),
            "apiVersion": settings.app_version,
            "endpoints": [f"{route} - {desc}" for route, desc in ENDPOINTS.items()],
        },
    }


@app.get("/api/health")
def health(store: RecipeStore = Depends(get_store)):
    timestamp = datetime.now(timezone.utc).isoformat()
    try:
        count = store.count()
    except Exception as e:
        logger.exception("Health check failed")
        return failure(500, "Store unavailable", status="unhealthy", timestamp=timestamp, error=error_detail(e))
    return {
        "success": True,
        "status": "healthy",
        "timestamp": timestamp,
        "data": {"recipesInDatabase": count, "uptime": round(time.monotonic() - STARTED_AT, 3)},
    }
