"""
Prototyping project API routes. Submissions are multipart forms with files.
"""
from typing import List, Optional
import logging

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.dependencies.services import get_current_user_id, get_prototyping_service
from storefront.models import ProjectStatusUpdate, PrototypingProject
from storefront.services import PrototypingService
from storefront.uploads import IncomingFile

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Depends = http_adapter.Depends
Form = http_adapter.Form
File = http_adapter.File
UploadFile = http_adapter.UploadFile

router_adapter = http_adapter.create_router(prefix="/prototyping", tags=["prototyping"])
router = router_adapter.router

logger = logging.getLogger(__name__)


@router.get("", response_model=List[PrototypingProject])
def list_projects(
    user_id: str = Depends(get_current_user_id),
    prototyping: PrototypingService = Depends(get_prototyping_service),
) -> List[PrototypingProject]:
    return prototyping.list_projects(user_id)


@router.post("", response_model=PrototypingProject, status_code=201)
def submit_project(
    project_name: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    budget_range: Optional[str] = Form(None),
    timeline: Optional[str] = Form(None),
    files: Optional[List[UploadFile]] = File(None, description="Up to 10 model files or documents"),
    user_id: str = Depends(get_current_user_id),
    prototyping: PrototypingService = Depends(get_prototyping_service),
) -> PrototypingProject:
    """Submit a prototyping project with optional attachments."""
    fields = {
        "project_name": project_name,
        "category": category,
        "description": description,
        "budget_range": budget_range,
        "timeline": timeline,
    }
    incoming = [IncomingFile.from_upload(f) for f in files or [] if f.filename]
    return prototyping.submit_project(user_id, fields, incoming)


@router.get("/{project_id}", response_model=PrototypingProject)
def get_project(
    project_id: str,
    user_id: str = Depends(get_current_user_id),
    prototyping: PrototypingService = Depends(get_prototyping_service),
) -> PrototypingProject:
    return prototyping.get_project(user_id, project_id)


@router.put("/{project_id}/status", response_model=PrototypingProject)
def update_project_status(
    project_id: str,
    update: ProjectStatusUpdate,
    prototyping: PrototypingService = Depends(get_prototyping_service),
) -> PrototypingProject:
    return prototyping.update_status(project_id, update.status)
