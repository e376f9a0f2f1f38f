"""Contract Search Backend: FastAPI application entry point.

Provides the /api/search family of endpoints used by the contracts frontend.
"""

import hashlib
import logging
import time
from contextlib import asynccontextmanager

from fastapi import BackgroundTasks, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from contract_search.config import settings
from contract_search.errors import SearchError, SearchValidationError
from contract_search.schemas import AnalyticsEventRequest, SaveSearchRequest, SearchFilters
from contract_search.search.analytics import (
    load_search_analytics,
    record_search_event,
    summarize_analytics,
)
from contract_search.search.engine import MAX_SUGGESTIONS, SearchEngine
from contract_search.search.saved import SavedSearchService
from contract_search.services.cache import CacheService
from contract_search.storage.appwrite import AppwriteStore
from contract_search.storage.base import RecordStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger("contract_search")


def build_store() -> RecordStore:
    """Appwrite when credentials are configured, otherwise the seeded demo store."""
    if settings.is_demo_mode:
        from contract_search.demo_data import build_demo_store
        return build_demo_store()
    return AppwriteStore(
        endpoint=settings.appwrite_endpoint,
        project_id=settings.appwrite_project_id,
        api_key=settings.appwrite_api_key,
        database_id=settings.appwrite_database_id,
        timeout=settings.appwrite_timeout_seconds,
    )


store = build_store()
search_engine = SearchEngine(store)
saved_search_service = SavedSearchService(store)
suggestion_cache = CacheService()


def get_search_engine() -> SearchEngine:
    return search_engine


def get_saved_searches() -> SavedSearchService:
    return saved_search_service


def get_suggestion_cache() -> CacheService:
    return suggestion_cache


# ═══════════════ LIFESPAN ═══════════════

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Contract search starting | demo_mode=%s", settings.is_demo_mode)

    # Initialize analytics database (graceful degradation if unavailable)
    if settings.analytics_enabled:
        from contract_search.database import init_db
        db_ok = await init_db()
        logger.info("Database: %s", "connected" if db_ok else "unavailable (continuing without)")

    # Initialize Redis cache (graceful degradation if unavailable)
    redis_ok = await suggestion_cache.connect()
    logger.info("Redis: %s", "connected" if redis_ok else "unavailable (using in-memory fallback)")

    yield

    await suggestion_cache.disconnect()
    if settings.analytics_enabled:
        from contract_search.database import close_db
        await close_db()
    logger.info("Contract search shutting down")


# ═══════════════ APP ═══════════════

app = FastAPI(
    title="Contract Search API",
    description="Advanced search over contracts and files",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(SearchError)
async def search_error_handler(request: Request, exc: SearchError):
    if exc.status_code >= 500:
        logger.error("Request failed | %s %s | %s", request.method, request.url.path, exc.message[:300])
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# ═══════════════ HELPERS ═══════════════

def _client_ip_hash(request: Request) -> str:
    client_ip = request.headers.get("x-forwarded-for", "").split(",")[0].strip()
    if not client_ip:
        client_ip = request.client.host if request.client else "unknown"
    return hashlib.sha256(client_ip.encode()).hexdigest()


def _split(value: str | None) -> list[str] | None:
    """Comma-separated query parameter → list."""
    if not value:
        return None
    return [v.strip() for v in value.split(",") if v.strip()]


def _analytics_unavailable() -> JSONResponse:
    return JSONResponse(status_code=503, content={"error": "Search analytics unavailable"})


# ═══════════════ ENDPOINTS ═══════════════

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "demo_mode": settings.is_demo_mode,
        "analytics_enabled": settings.analytics_enabled,
    }


@app.get("/api/search")
async def search(
    request: Request,
    background_tasks: BackgroundTasks,
    q: str = "",
    user_id: str = Query("", alias="userId"),
    type: str | None = None,
    start_date: str | None = Query(None, alias="startDate"),
    end_date: str | None = Query(None, alias="endDate"),
    department: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    vendor: str | None = None,
    contract_type: str | None = Query(None, alias="contractType"),
    amount_min: float | None = Query(None, alias="amountMin"),
    amount_max: float | None = Query(None, alias="amountMax"),
    assigned_managers: str | None = Query(None, alias="assignedManagers"),
    compliance: str | None = None,
    expiry_date_start: str | None = Query(None, alias="expiryDateStart"),
    expiry_date_end: str | None = Query(None, alias="expiryDateEnd"),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    limit: int = 25,
    offset: int = 0,
    engine: SearchEngine = Depends(get_search_engine),
):
    """Advanced search: free text plus structured filters."""
    filters = SearchFilters(
        type=_split(type),
        start_date=start_date,
        end_date=end_date,
        department=department,
        status=status,
        priority=priority,
        vendor=vendor,
        contract_type=contract_type,
        amount_min=amount_min,
        amount_max=amount_max,
        assigned_managers=_split(assigned_managers),
        compliance=_split(compliance),
        expiry_date_start=expiry_date_start,
        expiry_date_end=expiry_date_end,
    )

    start = time.monotonic()
    try:
        result = await engine.search(
            q, user_id, filters,
            sort_by=sort_by, sort_order=sort_order, limit=limit, offset=offset,
        )
    except SearchError:
        raise
    except Exception as e:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.error("Search failed | %dms | %s", elapsed_ms, str(e)[:300])
        return JSONResponse(status_code=500, content={"error": "Search failed"})

    elapsed_ms = int((time.monotonic() - start) * 1000)

    # Log analytics in background (fire-and-forget)
    if settings.analytics_enabled and user_id:
        background_tasks.add_task(
            record_search_event,
            user_id=user_id,
            query=q,
            filters=filters.to_wire(),
            result_count=result.total,
            search_time_ms=elapsed_ms,
            user_agent=request.headers.get("user-agent", ""),
            client_ip_hash=_client_ip_hash(request),
        )

    response_data = result.to_wire()
    response_data["_search"] = {"ms": elapsed_ms}
    return JSONResponse(content=response_data)


@app.get("/api/search/quick")
async def quick_search(
    type: str,
    user_id: str = Query("anonymous", alias="userId"),
    user_role: str | None = Query(None, alias="userRole"),
    user_department: str | None = Query(None, alias="userDepartment"),
    limit: int = 25,
    offset: int = 0,
    engine: SearchEngine = Depends(get_search_engine),
):
    result = await engine.quick_search(
        type, user_id,
        user_role=user_role, user_department=user_department, limit=limit, offset=offset,
    )
    return JSONResponse(content=result.to_wire())


@app.get("/api/search/suggestions")
async def suggestions(
    q: str = "",
    limit: int = MAX_SUGGESTIONS,
    engine: SearchEngine = Depends(get_search_engine),
    cache: CacheService = Depends(get_suggestion_cache),
):
    if limit <= 0:
        raise SearchValidationError("limit", f"limit must be a positive integer, got {limit!r}")

    cache_key = cache.make_key("suggest", q)
    found = await cache.get(cache_key)
    if found is None:
        found = await engine.suggest(q)
        if found:
            await cache.set(cache_key, found)

    found = found[:limit]
    return {"suggestions": found, "query": q, "count": len(found)}


@app.get("/api/search/recent")
async def recent_searches(
    user_id: str = Query("", alias="userId"),
    limit: int = 10,
    engine: SearchEngine = Depends(get_search_engine),
):
    recent = await engine.recent(user_id, limit=limit)
    return {"recentSearches": [r.to_wire() for r in recent]}


@app.get("/api/search/saved")
async def list_saved_searches(
    user_id: str = Query("", alias="userId"),
    service: SavedSearchService = Depends(get_saved_searches),
):
    saved = await service.list(user_id)
    return {"savedSearches": [s.to_wire() for s in saved]}


@app.post("/api/search/saved")
async def save_search(
    body: SaveSearchRequest,
    service: SavedSearchService = Depends(get_saved_searches),
):
    saved = await service.save(body.user_id, body.name, body.query, body.filters)
    return {"savedSearch": saved.to_wire()}


@app.delete("/api/search/saved")
async def delete_saved_search(
    search_id: str = Query(..., alias="searchId"),
    user_id: str = Query(..., alias="userId"),
    service: SavedSearchService = Depends(get_saved_searches),
):
    await service.delete(search_id, user_id)
    return {"success": True}


@app.post("/api/search/analytics", status_code=202)
async def log_search_analytics(
    request: Request,
    body: AnalyticsEventRequest,
    background_tasks: BackgroundTasks,
):
    """Explicit analytics event from a client: accepted, written in background."""
    if not body.query.strip():
        raise SearchValidationError("query", "query is required")
    if not settings.analytics_enabled:
        return _analytics_unavailable()

    background_tasks.add_task(
        record_search_event,
        user_id=body.user_id,
        query=body.query,
        filters=body.filters.to_wire(),
        result_count=body.result_count,
        search_time_ms=body.search_time,
        user_agent=request.headers.get("user-agent", ""),
        client_ip_hash=_client_ip_hash(request),
    )
    return {"accepted": True}


@app.get("/api/search/analytics")
async def get_search_analytics(
    user_id: str = Query("", alias="userId"),
    days: int = 30,
    limit: int = 100,
):
    if not user_id:
        raise SearchValidationError("userId", "userId is required")
    if days <= 0:
        raise SearchValidationError("days", f"days must be a positive integer, got {days!r}")
    if not settings.analytics_enabled:
        return _analytics_unavailable()

    try:
        events = await load_search_analytics(user_id, days=days, limit=limit)
    except Exception as e:
        logger.error("Analytics read failed | user=%s | %s", user_id, str(e)[:200])
        return _analytics_unavailable()

    return {"analytics": summarize_analytics(events).to_wire()}
