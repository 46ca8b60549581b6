import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy import select

from sports_admin.api.router import api_router
from sports_admin.core.config import get_settings
from sports_admin.core.security import hash_password
from sports_admin.db.session import get_session_factory
from sports_admin.models.admin import Admin

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        if settings.auto_create_admin:
            session_factory = get_session_factory()
            with session_factory() as db:
                email = settings.bootstrap_admin_email.lower()
                existing = db.scalar(select(Admin).where(Admin.email == email))
                if not existing:
                    admin = Admin(
                        name=settings.bootstrap_admin_name,
                        email=email,
                        password_hash=hash_password(settings.bootstrap_admin_password),
                    )
                    db.add(admin)
                    db.commit()
                    logger.info("Created bootstrap admin %s", email)
        yield

    app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    settings.media_path.mkdir(parents=True, exist_ok=True)
    app.mount("/media", StaticFiles(directory=str(settings.media_path)), name="media")
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


app = create_app()
