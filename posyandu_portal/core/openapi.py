from fastapi.openapi.utils import get_openapi
from posyandu_portal.core.config import settings


def custom_openapi(app):
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title=settings.APP_NAME,
        version=settings.PROJECT_VERSION,
        description=(
            "Posyandu portal API. Reads are served from a TTL data cache; "
            "pass refresh=true to force a backend fetch."
        ),
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema
