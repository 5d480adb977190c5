from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.biz_response import BizResponse
from app.core.config import settings
from app.core.exceptions import AuthError, PermissionDeniedError
from app.core.logx import logger
from app.routers import (
    auth,
    users,
    follows,
    blacklist,
    blogs,
    favorites,
    history,
    comments,
    notifications,
    moderation,
)
from app.storage.database import init_db


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.AUTO_CREATE_TABLES:
        init_db()
        logger.info("database tables ready")
    yield


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册路由
app.include_router(auth.auth_router)
app.include_router(users.users_router)
app.include_router(follows.follows_router)
app.include_router(blacklist.blacklist_router)
app.include_router(blogs.blogs_router)
app.include_router(favorites.favorites_router)
app.include_router(history.history_router)
app.include_router(comments.comments_router)
app.include_router(notifications.notifications_router)
app.include_router(moderation.moderation_router)


# 依赖里抛出的认证 / 权限异常（路由里的 try 接不到）
@app.exception_handler(AuthError)
async def auth_error_handler(request: Request, exc: AuthError):
    return BizResponse(data=None, msg=exc.message, status_code=401)


@app.exception_handler(PermissionDeniedError)
async def permission_error_handler(request: Request, exc: PermissionDeniedError):
    return BizResponse(data=None, msg=exc.message, status_code=403)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    msg = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "invalid request"))
    return BizResponse(data=None, msg=msg, status_code=400, error="ValidationError")


# uvicorn main:app
# uvicorn main:app --reload
@app.get("/")
def root():
    return {"message": f"Welcome to {settings.APP_NAME}"}
