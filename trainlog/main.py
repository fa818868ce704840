import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from trainlog.core.config import settings
from trainlog.core.errors import DomainError
from trainlog.core.logging import configure_logging
from trainlog.routers.auth import router as auth_router
from trainlog.routers.me import router as me_router
from trainlog.routers.plans import router as plans_router
from trainlog.routers.sessions import router as sessions_router

logger = logging.getLogger(__name__)

configure_logging()

app = FastAPI(title="Trainlog API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    logger.warning("%s %s rejected: %s (%s)", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth_router)
app.include_router(me_router)
app.include_router(sessions_router)
app.include_router(plans_router)



@app.get("/health")
def health():
    return {"ok": True}
