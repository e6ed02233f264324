"""Dependency injection for FastAPI routes."""

from typing import Annotated

from fastapi import Depends, Request

from siteforge.config import ConfigStore, Settings
from siteforge.repositories import HostedSiteRepository, ProjectRepository
from siteforge.services import GenerationPipeline, LLMGateway, ScrapeOrchestrator


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_config_store(request: Request) -> ConfigStore:
    return request.app.state.config_store


def get_orchestrator(request: Request) -> ScrapeOrchestrator:
    return request.app.state.orchestrator


def get_gateway(request: Request) -> LLMGateway:
    return request.app.state.gateway


def get_pipeline(request: Request) -> GenerationPipeline:
    return request.app.state.pipeline


def get_project_repository(request: Request) -> ProjectRepository:
    return request.app.state.projects


def get_hosted_site_repository(request: Request) -> HostedSiteRepository:
    return request.app.state.hosted_sites


# Type aliases for dependency injection
AppSettings = Annotated[Settings, Depends(get_app_settings)]
AppConfigStore = Annotated[ConfigStore, Depends(get_config_store)]
Orchestrator = Annotated[ScrapeOrchestrator, Depends(get_orchestrator)]
Gateway = Annotated[LLMGateway, Depends(get_gateway)]
Pipeline = Annotated[GenerationPipeline, Depends(get_pipeline)]
Projects = Annotated[ProjectRepository, Depends(get_project_repository)]
HostedSites = Annotated[HostedSiteRepository, Depends(get_hosted_site_repository)]
