from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config.logging import configure_logging
from app.config.settings import get_settings
from app.api.errors import register_exception_handlers
from app.api.router import api_router

settings = get_settings()
configure_logging(settings)

app = FastAPI(title="Store ratings platform", debug=settings.debug)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)
app.include_router(api_router, prefix="/api")
