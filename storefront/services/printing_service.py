"""
Printing service - print quotes and printing requests.

The estimate stored with a request is always computed here; a cost sent by
the client is never trusted.
"""
import logging
from typing import Any, List, Mapping, Optional

from storefront.exceptions import NotFoundError, ValidationFailed
from storefront.models import (
    PrintingRequest,
    PrintingRequestCreate,
    PrintingStatus,
    PrintOptions,
    QuoteFileInfo,
    QuoteResponse,
    validate_input,
)
from storefront.services.quote import calculate_quote
from storefront.storage import StorageInterface
from storefront.uploads import MODEL_EXTENSIONS, FileStore, IncomingFile

logger = logging.getLogger(__name__)


class PrintingService:
    """Service for 3D-printing quotes and requests."""

    def __init__(self, storage: StorageInterface, file_store: FileStore):
        self.storage = storage
        self.file_store = file_store

    def _options(self, upload: Optional[IncomingFile], fields: Mapping[str, Any]) -> PrintOptions:
        if upload is None or not upload.filename:
            raise ValidationFailed("No file uploaded")
        result = validate_input(PrintOptions, fields)
        if not result.ok:
            raise ValidationFailed(result.reason, errors=result.errors)
        return result.value

    def quote(self, upload: Optional[IncomingFile], fields: Mapping[str, Any]) -> QuoteResponse:
        """
        Price a print without placing a request. The file is checked and
        measured but not kept.

        Raises:
            ValidationFailed: No file, or invalid options
            UploadRejected: Not a model file, or too large
        """
        options = self._options(upload, fields)
        size = self.file_store.measure(upload, MODEL_EXTENSIONS)
        result = calculate_quote(options.material, options.quality, options.infill_density)

        return QuoteResponse(
            material_cost=result.material_cost,
            print_time=result.print_time,
            labor_cost=result.labor_cost,
            processing_fee=result.processing_fee,
            total=result.total,
            weight=result.weight,
            delivery_time=result.delivery_time,
            selected_material=result.material,
            quality=result.quality,
            infill_density=result.infill_density,
            file_info=QuoteFileInfo(
                original_name=upload.filename,
                size=size,
                mime_type=upload.content_type or "application/octet-stream",
            ),
        )

    def submit_request(
        self,
        user_id: str,
        upload: Optional[IncomingFile],
        fields: Mapping[str, Any],
    ) -> PrintingRequest:
        """
        Store a model file and place a printing request for it.

        Raises:
            ValidationFailed: No file, or invalid options
            UploadRejected: Not a model file, or too large
        """
        options = self._options(upload, fields)
        descriptor = self.file_store.save(upload, MODEL_EXTENSIONS)
        result = calculate_quote(options.material, options.quality, options.infill_density)

        try:
            request = self.storage.printing_requests.create(PrintingRequestCreate(
                **options.model_dump(),
                user_id=user_id,
                file=descriptor,
                estimated_cost=result.total,
                estimated_time=result.print_time,
            ))
        except Exception:
            self.file_store.remove([descriptor])
            raise

        logger.info(
            f"Placed printing request {request.id}: {options.material.value}/{options.quality.value}, "
            f"estimate {result.total}"
        )
        return request

    def list_requests(self, user_id: str) -> List[PrintingRequest]:
        return self.storage.printing_requests.list_by_owner(user_id)

    def get_request(self, user_id: str, request_id: str) -> PrintingRequest:
        request = self.storage.printing_requests.get_by_id(request_id)
        if request is None or request.user_id != user_id:
            raise NotFoundError(f"Printing request {request_id} not found")
        return request

    def update_status(self, request_id: str, status: PrintingStatus) -> PrintingRequest:
        updated = self.storage.printing_requests.update(request_id, {"status": PrintingStatus(status)})
        if updated is None:
            raise NotFoundError(f"Printing request {request_id} not found")
        logger.info(f"Printing request {request_id} status changed to {updated.status.value}")
        return updated
