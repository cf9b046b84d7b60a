import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from config import ADMIN_PASSWORD, ADMIN_USERNAME, CORS_ORIGINS, LOG_LEVEL
from database import SessionLocal, init_db
from security import hash_password
from services.user_service import ensure_admin
from achievements.achievements_init import init_achievements
from services.errors import ServiceError
from routers.auth_router import router as auth_router
from routers.quiz_router import router as quiz_router
from routers.achievement_router import router as achievement_router
from routers.leaderboard_router import router as leaderboard_router

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    init_achievements()
    logger.info("Database ready, achievement catalog seeded")
    if ADMIN_USERNAME and ADMIN_PASSWORD:
        db = SessionLocal()
        try:
            ensure_admin(db, ADMIN_USERNAME, hash_password(ADMIN_PASSWORD))
        finally:
            db.close()
        logger.info(f"Admin account {ADMIN_USERNAME} ready")
    yield


app = FastAPI(title="Quiz Arena", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    logger.warning(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"detail": {"code": exc.code}})


app.include_router(auth_router, prefix="/api")
app.include_router(quiz_router, prefix="/api")
app.include_router(achievement_router, prefix="/api")
app.include_router(leaderboard_router, prefix="/api")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
