import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ems.api.health import router as health_router
from ems.api.me import router as me_router
from ems.api.root import router as root_router
from ems.api.roles import router as roles_router
from ems.api.departments import router as departments_router
from ems.api.employees import router as employees_router
from ems.api.leaves import router as leaves_router
from ems.api.manager import router as manager_router
from ems.api.dashboard import router as dashboard_router
from ems.api.activity import router as activity_router
from ems.api.audit import router as audit_router
from ems.core.config import settings
from ems.core.errors import EMSError, InternalFailure
from ems.core.logging import configure_logging

configure_logging()
logger = logging.getLogger("ems")

app = FastAPI(title="Employee Management Backend")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EMSError)
async def handle_domain_error(request: Request, exc: EMSError):
    if isinstance(exc, InternalFailure):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%s): %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(root_router)
app.include_router(health_router)
app.include_router(me_router)
app.include_router(roles_router)
app.include_router(departments_router)
app.include_router(employees_router)
app.include_router(leaves_router)
app.include_router(manager_router)
app.include_router(dashboard_router)
app.include_router(activity_router)
app.include_router(audit_router)
