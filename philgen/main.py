"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from philgen.config import settings
from philgen.engine.registry import register_traits

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.philgen_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Philgen",
        description="Procedural layered vector traits composed into one SVG",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Import all trait modules to trigger registration
    register_traits()

    from philgen.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
