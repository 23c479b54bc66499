# STOREFRONT/backend/storefront/services/chatbot_service.py : le chatbot à mots-clés

import logging
import re
from typing import Any, Dict, List, Optional

from storefront.constants import (
    CHATBOT_FALLBACK_REPLY,
    CHATBOT_MAX_RECOMMENDATIONS,
    CHATBOT_RULES,
)
from storefront.models import models
from storefront.models.models import utcnow
from storefront.services.storage import Storage

logger = logging.getLogger(__name__)


def _mentions(text: str, keyword: str, whole_word: bool = False) -> bool:
    # début de mot : "hi" ne doit pas correspondre à "shipping" ; "products" compte pour "product"
    pattern = r"\b" + re.escape(keyword)
    if whole_word:
        # mot entier : "hi" ne doit pas non plus correspondre à "high" ni "history"
        pattern += r"\b"
    return re.search(pattern, text) is not None


def match_intent(message: str) -> Optional[Dict[str, Any]]:
    """Première règle dont les mots-clés apparaissent dans le message"""
    text = message.lower()
    for rule in CHATBOT_RULES:
        hits = [_mentions(text, keyword, rule.get("whole_word", False)) for keyword in rule["keywords"]]
        if (all(hits) if rule["match"] == "all" else any(hits)):
            return rule
    return None


def match_reply(message: str, business_name: Optional[str] = None) -> Dict[str, Any]:
    """Réponse prédéfinie pour un message : {intent, text}"""
    rule = match_intent(message)
    if rule is None:
        return {"intent": "fallback", "text": CHATBOT_FALLBACK_REPLY}
    return {
        "intent": rule["intent"],
        "text": rule["reply"].format(business_name=business_name or "our store"),
    }


def product_card(product: models.Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "salePrice": product.sale_price,
        "isOnSale": product.is_on_sale,
        "imageUrl": product.image_url,
    }


def make_message(role: str, content: str, recommendations: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    message = {"role": role, "content": content, "timestamp": utcnow().isoformat()}
    if recommendations is not None:
        message["productRecommendations"] = recommendations
    return message


def widget_embed_code(base_url: str, business_id: int) -> str:
    """Extrait HTML à coller sur un site pour charger le widget du chatbot"""
    base_url = base_url.rstrip("/")
    return f"""
      <script>
        (function() {{
          const script = document.createElement('script');
          script.src = '{base_url}/api/chatbot/widget.js';
          script.async = true;
          script.dataset.businessId = '{business_id}';
          document.head.appendChild(script);
        }})();
      </script>
    """


class ChatbotService:
    """Échanges du widget pour une entreprise donnée"""

    def __init__(self, storage: Storage, business: models.Business):
        self.storage = storage
        self.business = business

    def recommend_products(self) -> List[Dict[str, Any]]:
        products = self.storage.get_products_by_business(self.business.id)
        available = [p for p in products if p.in_stock] or products
        return [product_card(p) for p in available[:CHATBOT_MAX_RECOMMENDATIONS]]

    def start_conversation(self, customer_name: Optional[str], customer_email: Optional[str]) -> models.Conversation:
        return self.storage.create_conversation(
            business_id=self.business.id,
            customer_name=customer_name or "Guest",
            customer_email=customer_email,
            messages=[]
        )

    def reply(self, conversation: models.Conversation, text: str) -> Dict[str, Any]:
        """
        Ajoute le message du client et la réponse du bot à la conversation.
        Les messages existants ne sont jamais modifiés.
        """
        answer = match_reply(text, self.business.name)
        recommendations = self.recommend_products() if answer["intent"] == "product_inquiry" else []
        bot_message = make_message("assistant", answer["text"], recommendations)

        messages = list(conversation.messages or [])
        messages.append(make_message("user", text))
        messages.append(bot_message)
        self.storage.update_conversation(conversation, {"messages": messages})
        logger.info(f"Chatbot business {self.business.id}: intention '{answer['intent']}' (conversation {conversation.id})")
        return bot_message
