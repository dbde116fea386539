"""
Project endpoints
"""

from fastapi import APIRouter, Depends, Response, status

from ..system import TrackerSystem, get_tracker_system
from .errors import failure_message
from .schemas import CreateProjectRequest, UpdateProjectRequest, camelize


router = APIRouter()


@router.get("")
async def list_projects(system: TrackerSystem = Depends(get_tracker_system)):
    """List all projects, newest first"""
    with failure_message("Failed to fetch projects"):
        projects = system.projects.list()
    return camelize([project.to_dict() for project in projects])


@router.get("/{project_id}")
async def get_project(project_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Get project by ID"""
    with failure_message("Failed to fetch project"):
        project = system.projects.require(project_id)
    return camelize(project.to_dict())


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_project(
    request: CreateProjectRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Create a new project"""
    with failure_message("Failed to create project"):
        project = system.projects.create(**request.values())
    return camelize(project.to_dict())


@router.patch("/{project_id}")
async def update_project(
    project_id: str,
    request: UpdateProjectRequest,
    system: TrackerSystem = Depends(get_tracker_system)
):
    """Update only the provided project fields"""
    with failure_message("Failed to update project"):
        project = system.projects.update(project_id, request.values())
    return camelize(project.to_dict())


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, system: TrackerSystem = Depends(get_tracker_system)):
    """Delete a project; its letters and credits are kept"""
    with failure_message("Failed to delete project"):
        system.projects.delete(project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
