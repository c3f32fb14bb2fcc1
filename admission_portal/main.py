import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admission_portal.api.v1.admissions.router import router as admissions_router
from admission_portal.api.v1.auth.router import router as auth_router
from admission_portal.api.v1.fees.router import router as fees_router
from admission_portal.api.v1.maintenance.router import router as maintenance_router
from admission_portal.api.v1.reports.router import router as reports_router
from admission_portal.api.v1.schools.router import router as schools_router
from admission_portal.core.config import settings
from admission_portal.core.exceptions import ServiceError

logger = logging.getLogger(__name__)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    # Reached for errors raised outside router try blocks, e.g. in get_db.
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="School Admission Portal")

    # CORS: allow the admission and dashboard frontends to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, service_error_handler)

    # Routers
    app.include_router(auth_router)
    app.include_router(schools_router)
    app.include_router(admissions_router)
    app.include_router(fees_router)
    app.include_router(reports_router)
    app.include_router(maintenance_router)

    return app


app = create_app()
