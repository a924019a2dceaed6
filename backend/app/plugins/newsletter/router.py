"""
Newsletter plugin routes.

Managing newsletters requires an authenticated EDITOR or ADMIN of the
tenant. Subscribing and unsubscribing are public and name the tenant in the
``X-Tenant-ID`` header.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Security, status
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.core.database import get_db
from backend.app.core.logging import tenant_id_ctx
from backend.app.core.security import (
    NEWSLETTER_READ,
    NEWSLETTER_WRITE,
    AuthenticatedUser,
    get_current_user,
    get_tenant_id,
)
from backend.app.plugins.newsletter.schemas import (
    Newsletter,
    NewsletterCreate,
    NewsletterUpdate,
    SubscribeRequest,
    Subscriber,
    UnsubscribeRequest,
)
from backend.app.plugins.newsletter.service import (
    NewsletterService,
    SubscriberService,
    get_newsletter_service,
    get_subscriber_service,
)
from backend.app.schemas.common import ApiResponse, MessageResponse
from backend.app.services import tenant_service

logger = logging.getLogger(__name__)
router = APIRouter()


async def get_header_tenant_id(
    x_tenant_id: Optional[str] = Header(None, alias="X-Tenant-ID"),
    db: AsyncSession = Depends(get_db),
) -> str:
    """Tenant for public subscriber endpoints; the tenant must exist."""
    if not x_tenant_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tenant not identified")
    tenant = await tenant_service.get_tenant(db, x_tenant_id)
    tenant_id_ctx.set(tenant.id)
    return tenant.id


def _newsletter_or_404(newsletter: Optional[Newsletter]) -> Newsletter:
    if newsletter is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Newsletter not found")
    return newsletter


# Subscriber routes are declared before "/{newsletter_id}" so they are matched first.

@router.post("/subscribers", response_model=ApiResponse[Subscriber], status_code=status.HTTP_201_CREATED)
async def subscribe(
    payload: SubscribeRequest,
    tenant_id: str = Depends(get_header_tenant_id),
    subscribers: SubscriberService = Depends(get_subscriber_service),
):
    subscriber = await subscribers.subscribe(tenant_id, payload)
    return ApiResponse(data=subscriber)


@router.post("/subscribers/unsubscribe", response_model=ApiResponse[Subscriber])
async def unsubscribe(
    payload: UnsubscribeRequest,
    tenant_id: str = Depends(get_header_tenant_id),
    subscribers: SubscriberService = Depends(get_subscriber_service),
):
    subscriber = await subscribers.unsubscribe(tenant_id, payload)
    if subscriber is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Subscriber not found")
    return ApiResponse(data=subscriber)


@router.get("/subscribers", response_model=ApiResponse[List[Subscriber]])
async def list_subscribers(
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_READ]),
    subscribers: SubscriberService = Depends(get_subscriber_service),
):
    return ApiResponse(data=await subscribers.find_all(tenant_id))


@router.get("/subscribers/active", response_model=ApiResponse[List[Subscriber]])
async def list_active_subscribers(
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_READ]),
    subscribers: SubscriberService = Depends(get_subscriber_service),
):
    return ApiResponse(data=await subscribers.find_active(tenant_id))


@router.post("", response_model=ApiResponse[Newsletter], status_code=status.HTTP_201_CREATED)
async def create_newsletter(
    payload: NewsletterCreate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_WRITE]),
    newsletters: NewsletterService = Depends(get_newsletter_service),
):
    newsletter = await newsletters.create(tenant_id, payload)
    logger.info(f"Newsletter created: {newsletter.id} by {current_user.id}")
    return ApiResponse(data=newsletter)


@router.get("", response_model=ApiResponse[List[Newsletter]])
async def list_newsletters(
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_READ]),
    newsletters: NewsletterService = Depends(get_newsletter_service),
):
    return ApiResponse(data=await newsletters.find_all(tenant_id))


@router.get("/{newsletter_id}", response_model=ApiResponse[Newsletter])
async def get_newsletter(
    newsletter_id: str,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_READ]),
    newsletters: NewsletterService = Depends(get_newsletter_service),
):
    return ApiResponse(data=_newsletter_or_404(await newsletters.find_by_id(tenant_id, newsletter_id)))


@router.put("/{newsletter_id}", response_model=ApiResponse[Newsletter])
async def update_newsletter(
    newsletter_id: str,
    payload: NewsletterUpdate,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_WRITE]),
    newsletters: NewsletterService = Depends(get_newsletter_service),
):
    updated = await newsletters.update(tenant_id, newsletter_id, payload)
    return ApiResponse(data=_newsletter_or_404(updated))


@router.delete("/{newsletter_id}", response_model=MessageResponse)
async def delete_newsletter(
    newsletter_id: str,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_WRITE]),
    newsletters: NewsletterService = Depends(get_newsletter_service),
):
    if not await newsletters.delete(tenant_id, newsletter_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Newsletter not found")
    return MessageResponse(message="Newsletter deleted successfully")


@router.post("/{newsletter_id}/send", response_model=ApiResponse[Newsletter])
async def send_newsletter(
    newsletter_id: str,
    tenant_id: str = Depends(get_tenant_id),
    current_user: AuthenticatedUser = Security(get_current_user, scopes=[NEWSLETTER_WRITE]),
    newsletters: NewsletterService = Depends(get_newsletter_service),
    subscribers: SubscriberService = Depends(get_subscriber_service),
):
    sent = _newsletter_or_404(await newsletters.send(tenant_id, newsletter_id))
    recipients = await subscribers.find_active(tenant_id)
    logger.info(
        f"Newsletter {sent.id} marked sent",
        extra={"extra_data": {"newsletter_id": sent.id, "recipient_count": len(recipients)}},
    )
    return ApiResponse(data=sent)
