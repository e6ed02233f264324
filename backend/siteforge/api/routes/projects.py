"""Project management routes."""

import logging

from fastapi import APIRouter
from pydantic import ConfigDict

from siteforge.api.deps import Projects
from siteforge.errors import InvalidInputError, NotFoundError
from siteforge.models import BusinessFacts, CamelModel, Project
from siteforge.validation import (
    clean_business_facts,
    is_valid_identifier,
    require_project_name,
)

logger = logging.getLogger(__name__)

router = APIRouter()


class SaveProjectRequest(CamelModel):
    """Request to save a project.

    Fields beyond ``name`` and ``businessInfo`` (scraped data, generated
    versions, outreach...) are stored verbatim.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    business_info: BusinessFacts | None = None


class SaveProjectResponse(CamelModel):
    success: bool = True
    project_id: str
    message: str = "Project saved successfully"


class ProjectResponse(CamelModel):
    success: bool = True
    project: Project


class ProjectListResponse(CamelModel):
    """List of projects response."""

    success: bool = True
    projects: list[Project]
    total: int


class DeleteProjectResponse(CamelModel):
    success: bool = True
    message: str = "Project deleted successfully"
    project_id: str


def _validated_id(project_id: str) -> str:
    if not is_valid_identifier(project_id):
        raise InvalidInputError("Invalid project ID format", "id")
    return project_id


@router.post("", response_model=SaveProjectResponse)
async def save_project(request: SaveProjectRequest, projects: Projects) -> SaveProjectResponse:
    """Save a new project under a fresh id."""
    name = require_project_name(request.name, "name")
    if request.business_info is None or not request.business_info.name:
        raise InvalidInputError("Business information is required", "businessInfo")
    facts = clean_business_facts(request.business_info)

    logger.info(f"Saving project: {name}")
    project = await projects.save(name, facts, request.model_extra)
    return SaveProjectResponse(project_id=project.id)


@router.get("", response_model=ProjectListResponse)
async def list_projects(projects: Projects) -> ProjectListResponse:
    """List all projects, newest first."""
    items = await projects.list()
    return ProjectListResponse(projects=items, total=len(items))


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, projects: Projects) -> ProjectResponse:
    """Get a specific project."""
    project = await projects.get(_validated_id(project_id))
    if project is None:
        raise NotFoundError("Project not found")
    return ProjectResponse(project=project)


@router.delete("/{project_id}", response_model=DeleteProjectResponse)
async def delete_project(project_id: str, projects: Projects) -> DeleteProjectResponse:
    """Delete a project."""
    project_id = _validated_id(project_id)
    if not await projects.delete(project_id):
        raise NotFoundError("Project not found")
    return DeleteProjectResponse(project_id=project_id)
