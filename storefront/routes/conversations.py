# STOREFRONT/backend/storefront/routes/conversations.py

from fastapi import APIRouter, Depends
from typing import Any, Dict, List

from storefront.auth import get_current_business
from storefront.models import models as db_models
from storefront.schemas import schemas
from storefront.services.business_service import get_owned
from storefront.services.chatbot_service import make_message
from storefront.services.storage import Storage, get_storage

router = APIRouter(prefix="/api/conversations", tags=["chatbot"])


def _stored_messages(messages: List[schemas.ConversationMessage]) -> List[Dict[str, Any]]:
    stored = []
    for message in messages:
        entry = make_message(message.role, message.content)
        if message.timestamp is not None:
            entry["timestamp"] = message.timestamp.isoformat()
        stored.append(entry)
    return stored


@router.get("", response_model=List[schemas.ConversationOut])
def get_conversations(
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return storage.get_conversations_by_business(business.id)

@router.post("", response_model=schemas.ConversationOut, status_code=201)
def create_conversation(
    payload: schemas.ConversationCreate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    conversation = storage.create_conversation(
        business_id=business.id,
        customer_name=payload.customer_name,
        customer_email=payload.customer_email,
        messages=_stored_messages(payload.messages)
    )
    storage.commit()
    return storage.refresh(conversation)

@router.get("/{conversation_id}", response_model=schemas.ConversationOut)
def get_conversation(
    conversation_id: int,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    return get_owned(storage.get_conversation(conversation_id), business.id, "Conversation")

@router.patch("/{conversation_id}", response_model=schemas.ConversationOut)
def update_conversation(
    conversation_id: int,
    payload: schemas.ConversationUpdate,
    business: db_models.Business = Depends(get_current_business),
    storage: Storage = Depends(get_storage)
):
    """Les nouveaux messages sont ajoutés à la suite de l'historique"""
    conversation = get_owned(storage.get_conversation(conversation_id), business.id, "Conversation")
    patch = payload.model_dump(exclude_unset=True, exclude={"messages"})
    patch["messages"] = list(conversation.messages or []) + _stored_messages(payload.messages)

    storage.update_conversation(conversation, patch)
    storage.commit()
    return storage.refresh(conversation)
