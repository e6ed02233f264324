"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from siteforge.api.errors import register_exception_handlers
from siteforge.api.routes import config, generation, hosting, projects, scrape
from siteforge.config import ConfigStore, LLMConfig, Settings, get_settings
from siteforge.logging_config import configure_logging
from siteforge.repositories import HostedSiteRepository, InMemoryKeyValueStore, ProjectRepository
from siteforge.services import GenerationPipeline, LLMGateway, ScrapeOrchestrator

logger = logging.getLogger(__name__)

ENDPOINTS = [
    "POST /api/scrape - Scrape website data",
    "POST /api/analyze - Analyze business info",
    "POST /api/recreate - Generate new website",
    "POST /api/modify-website - Modify a generated website",
    "POST /api/outreach - Generate outreach materials",
    "POST /api/export-package - Export complete website package",
    "GET /api/projects - List all saved projects",
    "POST /api/projects - Save a new project",
    "GET /api/projects/{id} - Load a specific project",
    "DELETE /api/projects/{id} - Delete a project",
    "POST /api/host-website - Host a generated website",
    "GET /api/hosted-sites - List all hosted websites",
    "GET /hosted/{siteId} - View a hosted website",
    "GET /api/config/get - Current provider configuration",
    "POST /api/config/save - Update provider configuration",
    "POST /api/config/test - Test the selected provider",
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    llm_config = app.state.config_store.current()
    logger.info(f"Gemini API: {'configured' if llm_config.google_api_key else 'not configured'}")
    logger.info(
        "Scraping: "
        + ("Firecrawl enabled" if llm_config.scraping_api_key else "direct fetch fallback only")
    )
    yield


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application and wire its services onto ``app.state``."""
    settings = settings or get_settings()
    configure_logging(logging.DEBUG if settings.debug else logging.INFO)

    app = FastAPI(
        title=settings.app_name,
        description="Scrape a website, regenerate it with AI and prepare outreach",
        version="1.0.0",
        lifespan=lifespan,
    )

    config_store = ConfigStore(LLMConfig.from_settings(settings))
    gateway = LLMGateway(config_store)

    app.state.settings = settings
    app.state.config_store = config_store
    app.state.gateway = gateway
    app.state.orchestrator = ScrapeOrchestrator(config_store, settings)
    app.state.pipeline = GenerationPipeline(gateway, config_store)
    app.state.projects = ProjectRepository(InMemoryKeyValueStore())
    app.state.hosted_sites = HostedSiteRepository(
        settings.hosted_sites_dir, settings.public_base_url
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, development=settings.is_development)

    # Include routers
    app.include_router(scrape.router, prefix="/api", tags=["scrape"])
    app.include_router(generation.router, prefix="/api", tags=["generation"])
    app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
    app.include_router(hosting.router, prefix="/api", tags=["hosting"])
    app.include_router(hosting.public_router, tags=["hosting"])
    app.include_router(config.router, prefix="/api/config", tags=["config"])

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": ENDPOINTS,
        }

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs",
        }

    return app


app = create_app()
