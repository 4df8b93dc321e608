from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from posyandu_portal.api.v1.router import router as v1_router
from posyandu_portal.core.config import settings
from posyandu_portal.core.exceptions.handlers import register_exception_handlers
from posyandu_portal.core.lifespan import lifespan
from posyandu_portal.core.logging import setup_early_logging
from posyandu_portal.core.middlewares import LogRequestsMiddleware
from posyandu_portal.core.openapi import custom_openapi
from posyandu_portal.core.responses import send_success

# Setup early logging for startup errors
setup_early_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.PROJECT_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "kader", "description": "Kader dashboard and child records"},
        {"name": "journals", "description": "Meal journal and PMT logs"},
        {"name": "consultations", "description": "Consultation threads"},
        {"name": "admin", "description": "Activity logs and posyandu management"},
        {"name": "cache", "description": "Data cache inspection and invalidation"},
    ],
)

# Customize OpenAPI schema
app.openapi = lambda: custom_openapi(app)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LogRequestsMiddleware)

# Register all exception handlers
register_exception_handlers(app)

# Include API routers
app.include_router(v1_router)


@app.get("/health")
async def health_check(request: Request):
    return send_success(
        message="OK",
        data={
            "status": "healthy",
            "version": settings.PROJECT_VERSION,
            "cache_entries": len(request.app.state.data_cache),
        },
    )
