"""Per-owner API key endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, HTTPException

from dictation.dependencies import get_credentials_service
from dictation.exceptions import InputValidationError
from dictation.handlers import CredentialsService
from dictation.response_models import ApiKeysStatus, UpdateApiKeysRequest

router = APIRouter(prefix="/credentials", tags=["credentials"])

CredentialsServiceDep = Annotated[CredentialsService, Depends(get_credentials_service)]
OwnerDep = Annotated[str, Header(alias="X-Owner-Id", min_length=1)]


@router.get("", response_model=ApiKeysStatus)
def get_api_keys(service: CredentialsServiceDep, owner_id: OwnerDep = "anonymous"):
    """Reports which of the owner's own API keys are stored."""
    return service.get_status(owner_id)


@router.put("", response_model=ApiKeysStatus)
def update_api_keys(
    request: UpdateApiKeysRequest,
    service: CredentialsServiceDep,
    owner_id: OwnerDep = "anonymous",
):
    """Validates and stores the owner's API keys for the external services."""
    try:
        return service.update_api_keys(
            owner_id, request.assemblyai_api_key, request.gemini_api_key
        )
    except InputValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)
