"""
Prototyping service - project submissions with attached files.
"""
import logging
from typing import Any, List, Mapping

from storefront.exceptions import NotFoundError, ValidationFailed
from storefront.models import (
    ProjectStatus,
    PrototypingProject,
    PrototypingProjectCreate,
    PrototypingProjectSubmit,
    validate_input,
)
from storefront.storage import StorageInterface
from storefront.uploads import (
    DOCUMENT_EXTENSIONS,
    MAX_PROJECT_FILES,
    MODEL_EXTENSIONS,
    FileStore,
    IncomingFile,
)

logger = logging.getLogger(__name__)

PROJECT_FILE_EXTENSIONS = MODEL_EXTENSIONS | DOCUMENT_EXTENSIONS


class PrototypingService:
    """Service for prototyping projects."""

    def __init__(self, storage: StorageInterface, file_store: FileStore):
        self.storage = storage
        self.file_store = file_store

    def submit_project(
        self,
        user_id: str,
        fields: Mapping[str, Any],
        files: List[IncomingFile],
    ) -> PrototypingProject:
        """
        Submit a prototyping project.

        Form fields are validated before any file is written; if storing the
        project fails, its files are removed again.

        Args:
            user_id: Submitting user
            fields: Raw form fields (project_name, category, description, ...)
            files: Attached model files and documents

        Returns:
            The stored project

        Raises:
            ValidationFailed: Invalid fields or too many files
            UploadRejected: A file has a disallowed type or is too large
        """
        result = validate_input(PrototypingProjectSubmit, fields)
        if not result.ok:
            raise ValidationFailed(result.reason, errors=result.errors)
        if len(files) > MAX_PROJECT_FILES:
            raise ValidationFailed(f"At most {MAX_PROJECT_FILES} files can be attached")

        descriptors = self.file_store.save_all(files, PROJECT_FILE_EXTENSIONS)
        try:
            project = self.storage.prototyping_projects.create(PrototypingProjectCreate(
                **result.value.model_dump(),
                user_id=user_id,
                files=descriptors,
            ))
        except Exception:
            self.file_store.remove(descriptors)
            raise

        logger.info(f"Submitted prototyping project {project.id} with {len(descriptors)} file(s)")
        return project

    def list_projects(self, user_id: str) -> List[PrototypingProject]:
        return self.storage.prototyping_projects.list_by_owner(user_id)

    def get_project(self, user_id: str, project_id: str) -> PrototypingProject:
        project = self.storage.prototyping_projects.get_by_id(project_id)
        if project is None or project.user_id != user_id:
            raise NotFoundError(f"Prototyping project {project_id} not found")
        return project

    def update_status(self, project_id: str, status: ProjectStatus) -> PrototypingProject:
        updated = self.storage.prototyping_projects.update(project_id, {"status": ProjectStatus(status)})
        if updated is None:
            raise NotFoundError(f"Prototyping project {project_id} not found")
        logger.info(f"Prototyping project {project_id} status changed to {updated.status.value}")
        return updated
