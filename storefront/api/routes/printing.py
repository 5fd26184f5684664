"""
3D-printing API routes: quotes and printing requests (multipart forms).
"""
from typing import List, Optional
import logging

from storefront.adapters.http_framework import HTTPFrameworkAdapter
from storefront.dependencies.services import get_current_user_id, get_printing_service
from storefront.models import PrintingRequest, PrintingStatusUpdate, QuoteResponse
from storefront.services import PrintingService
from storefront.uploads import IncomingFile

# Initialize adapter
http_adapter = HTTPFrameworkAdapter()
Depends = http_adapter.Depends
Form = http_adapter.Form
File = http_adapter.File
UploadFile = http_adapter.UploadFile

router_adapter = http_adapter.create_router(prefix="/printing", tags=["printing"])
router = router_adapter.router

logger = logging.getLogger(__name__)


def _print_options(material, quality, infill_density, color):
    return {
        "material": material,
        "quality": quality,
        "infill_density": infill_density,
        "color": color,
    }


@router.get("", response_model=List[PrintingRequest])
def list_printing_requests(
    user_id: str = Depends(get_current_user_id),
    printing: PrintingService = Depends(get_printing_service),
) -> List[PrintingRequest]:
    return printing.list_requests(user_id)


@router.post("/quote", response_model=QuoteResponse)
def quote_print(
    file: Optional[UploadFile] = File(None, description="3D model file (.stl, .obj, .3mf, .ply)"),
    material: Optional[str] = Form(None),
    quality: Optional[str] = Form(None),
    infill_density: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    printing: PrintingService = Depends(get_printing_service),
) -> QuoteResponse:
    """Price a print. The file is checked and measured, not stored."""
    upload = IncomingFile.from_upload(file) if file is not None else None
    return printing.quote(upload, _print_options(material, quality, infill_density, color))


@router.post("", response_model=PrintingRequest, status_code=201)
def submit_printing_request(
    file: Optional[UploadFile] = File(None, description="3D model file (.stl, .obj, .3mf, .ply)"),
    material: Optional[str] = Form(None),
    quality: Optional[str] = Form(None),
    infill_density: Optional[str] = Form(None),
    color: Optional[str] = Form(None),
    user_id: str = Depends(get_current_user_id),
    printing: PrintingService = Depends(get_printing_service),
) -> PrintingRequest:
    """Store the model and place a printing request; the estimate is computed server-side."""
    upload = IncomingFile.from_upload(file) if file is not None else None
    return printing.submit_request(user_id, upload, _print_options(material, quality, infill_density, color))


@router.get("/{request_id}", response_model=PrintingRequest)
def get_printing_request(
    request_id: str,
    user_id: str = Depends(get_current_user_id),
    printing: PrintingService = Depends(get_printing_service),
) -> PrintingRequest:
    return printing.get_request(user_id, request_id)


@router.put("/{request_id}/status", response_model=PrintingRequest)
def update_printing_status(
    request_id: str,
    update: PrintingStatusUpdate,
    printing: PrintingService = Depends(get_printing_service),
) -> PrintingRequest:
    return printing.update_status(request_id, update.status)
