# STOREFRONT/backend/storefront/routes/chatbot.py

import logging
from fastapi import APIRouter, Body, Depends, HTTPException
from typing import Any, Dict

from storefront.auth import get_current_business
from storefront.config import PUBLIC_BASE_URL
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.chatbot_service import ChatbotService, widget_embed_code
from storefront.services.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/chatbot", tags=["chatbot"])

@router.patch("/settings")
def update_chatbot_settings(
    settings: Dict[str, Any] = Body(...),
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Remplace les réglages du widget (message d'accueil, couleurs...)"""
    storage.update_business(business, {"chatbot_settings": settings})
    storage.commit()
    logger.info(f"Réglages du chatbot mis à jour (business {business.id})")
    return {"message": "Réglages du chatbot mis à jour", "settings": business.chatbot_settings}

@router.get("/widget/{business_id}", response_model=schemas.WidgetOut)
def get_widget(
    business_id: int,
    storage: Storage = Depends(get_storage)
):
    """Code d'intégration du widget (public, à coller sur le site de l'entreprise)"""
    if storage.get_business(business_id) is None:
        raise HTTPException(status_code=404, detail="Entreprise introuvable")
    return {"embed_code": widget_embed_code(PUBLIC_BASE_URL, business_id)}

@router.get("/conversations/{conversation_id}", response_model=schemas.ConversationOut)
def get_chatbot_conversation(
    conversation_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_conversation(conversation_id), business.id, "Conversation")

@router.post("/{business_id}/chat", response_model=schemas.ChatResponse)
def chat(
    business_id: int,
    payload: schemas.ChatRequest,
    storage: Storage = Depends(get_storage)
):
    """
    Point d'entrée public du widget : enregistre le message du client et
    la réponse du bot dans la conversation (créée au premier message).
    """
    business = storage.get_business(business_id)
    if business is None:
        raise HTTPException(status_code=404, detail="Entreprise introuvable")

    service = ChatbotService(storage, business)
    if payload.conversation_id is not None:
        conversation = storage.get_conversation(payload.conversation_id)
        # une conversation d'une autre entreprise est traitée comme absente
        if conversation is None or conversation.business_id != business.id:
            raise HTTPException(status_code=404, detail="Conversation introuvable")
    else:
        conversation = service.start_conversation(payload.customer_name, payload.customer_email)

    bot_message = service.reply(conversation, payload.message)
    storage.commit()
    return {"conversation_id": conversation.id, "message": bot_message}
