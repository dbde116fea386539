"""
Project Management Module

Projects are the construction/business undertakings that guarantee letters
and credits are drawn against.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .exceptions import ValidationError
from .repository import Repository
from .storage import StorageRecord


class ProjectStatus(Enum):
    """Project lifecycle status"""
    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass
class Project(StorageRecord):
    name: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE

    def __post_init__(self):
        super().__post_init__()
        if not self.name or not self.name.strip():
            raise ValidationError.for_field("name", "Project name is required")


class ProjectManager(Repository[Project]):
    """Projects table"""

    record_type = Project
    table_name = "projects"
    entity_name = "Project"
