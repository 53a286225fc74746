"""Account setup endpoints (the `setwebsite`, `hosgencode`, `setlfm`, `reset` commands)."""

import logging

from fastapi import APIRouter, Depends, status

from mljboard.api.dependencies import (
    get_account_setup_service,
    get_describe_identity_use_case,
)
from mljboard.api.schemas.accounts import (
    AccountRecordResponse,
    IdentityResponse,
    LastfmUsernameRequest,
    PairingCodeResponse,
    ResetResponse,
    WebsiteRequest,
)
from mljboard.application.services import AccountSetupService
from mljboard.application.use_cases import DescribeIdentityUseCase
from mljboard.domain.entities import UserRecordKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.put("/{handle}/website", response_model=AccountRecordResponse)
async def set_website(
    handle: str,
    body: WebsiteRequest,
    service: AccountSetupService = Depends(get_account_setup_service),
) -> AccountRecordResponse:
    """Store the user's Maloja website. Fails with 409 if one is already set."""
    website = await service.set_website(handle, body.website)
    return AccountRecordResponse(
        handle=handle, kind=UserRecordKind.WEBSITE.value, value=website
    )


@router.post(
    "/{handle}/pairing-code",
    response_model=PairingCodeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def issue_pairing_code(
    handle: str,
    service: AccountSetupService = Depends(get_account_setup_service),
) -> PairingCodeResponse:
    """Issue a relay pairing code. Fails with 409 if the user already has one."""
    code = await service.issue_pairing_code(handle)
    return PairingCodeResponse(handle=handle, pairing_code=code)


@router.put("/{handle}/lastfm", response_model=AccountRecordResponse)
async def set_lastfm_username(
    handle: str,
    body: LastfmUsernameRequest,
    service: AccountSetupService = Depends(get_account_setup_service),
) -> AccountRecordResponse:
    """Store (or replace) the user's Last.fm username."""
    username = await service.set_lastfm_username(handle, body.username)
    return AccountRecordResponse(
        handle=handle, kind=UserRecordKind.LASTFM_USERNAME.value, value=username
    )


@router.delete("/{handle}", response_model=ResetResponse)
async def reset_account(
    handle: str,
    service: AccountSetupService = Depends(get_account_setup_service),
) -> ResetResponse:
    """Remove the user's website and pairing codes (Last.fm username is kept)."""
    summary = await service.reset(handle)
    return ResetResponse(
        handle=handle,
        websites_removed=len(summary.websites),
        pairing_codes_removed=len(summary.pairing_codes),
    )


@router.get("/{handle}/identity", response_model=IdentityResponse)
async def describe_identity(
    handle: str,
    use_case: DescribeIdentityUseCase = Depends(get_describe_identity_use_case),
) -> IdentityResponse:
    """Show which backend the handle resolves to."""
    description = await use_case.execute(handle)
    return IdentityResponse(
        handle=handle, kind=description.kind, summary=description.summary
    )
