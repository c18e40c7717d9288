"""
PlacementBot Routes (public)

GET /bot/faqs - The FAQ corpus
POST /bot/ask - Answer a free-text question
"""

from fastapi import APIRouter, Depends

from placement_portal.core.errors import ValidationError
from placement_portal.db import get_store
from placement_portal.db.repositories import Store
from placement_portal.schemas.schemas import AskRequest, AskResponse, FAQsResponse
from placement_portal.services.bot_service import BotService

router = APIRouter(prefix="/bot", tags=["PlacementBot"])


@router.get("/faqs", response_model=FAQsResponse)
async def list_faqs(store: Store = Depends(get_store)):
    return FAQsResponse(faqs=BotService(store).list_faqs())


@router.post("/ask", response_model=AskResponse)
async def ask(data: AskRequest, store: Store = Depends(get_store)):
    if not data.question or not data.question.strip():
        raise ValidationError("Question is required")
    return AskResponse(**BotService(store).answer(data.question))
