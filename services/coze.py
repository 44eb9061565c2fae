"""Coze client: forwards conversation and chat operations to the Coze API."""
from typing import Any, Dict, List, Optional
import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from config import Settings
from exceptions import UpstreamError, UpstreamTransportError
from schemas.coze import (
    CozeEnvelope, CozeConversationData, CozeChatData, Message
)

logger = logging.getLogger(__name__)

CREATE_CONVERSATION_PATH = "/v1/conversation/create"
CONVERSATION_MESSAGE_LIST_PATH = "/v1/conversation/message/list"
CREATE_CHAT_PATH = "/v3/chat"
RETRIEVE_CHAT_PATH = "/v3/chat/retrieve"
CHAT_MESSAGE_LIST_PATH = "/v3/chat/message/list"


class CozeClient:
    """
    Synchronous client for the Coze API.

    Every call is a single attempt: build the request, send it, unwrap the
    ``{code, data, msg}`` envelope and turn a non-zero code into an
    ``UpstreamError``.
    """

    def __init__(self, settings: Settings, transport: Optional[httpx.BaseTransport] = None):
        self.bot_id = settings.coze_bot_id
        token = settings.load_coze_token()
        if not token:
            logger.warning("Coze token is empty; Coze will reject every call")
        self.client = httpx.Client(
            base_url=settings.coze_api_base,
            timeout=settings.coze_timeout,
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            transport=transport,
        )

    def close(self) -> None:
        self.client.close()

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, str]] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Any:
        """Send one request and return the envelope's ``data``."""
        try:
            response = self.client.request(method, path, params=params, json=payload)
        except httpx.RequestError as e:
            logger.error(f"Coze request {method} {path} failed: {e}")
            raise UpstreamTransportError() from e

        try:
            envelope = CozeEnvelope.model_validate(response.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error(f"Unparseable Coze response for {path} (HTTP {response.status_code}): {e}")
            raise UpstreamTransportError("Failed to parse external response", code=50005) from e

        if envelope.code != 0:
            logger.warning(f"Coze {path} returned code {envelope.code}: {envelope.msg}")
            raise UpstreamError(envelope.code, envelope.msg)

        return envelope.data

    def _parse(self, model, data: Any, path: str):
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            logger.error(f"Unexpected Coze data for {path}: {e}")
            raise UpstreamTransportError("Failed to parse external response", code=50005) from e

    def create_conversation(self, bot_id: Optional[str] = None, name: str = "") -> str:
        """Create a conversation and return its Coze id."""
        payload = {"bot_id": bot_id or self.bot_id, "name": name}
        data = self._request("POST", CREATE_CONVERSATION_PATH, payload=payload)
        return self._parse(CozeConversationData, data, CREATE_CONVERSATION_PATH).id

    def create_chat(self, user_id: int, conversation_id: str, message: str) -> CozeChatData:
        """Post one user question to a conversation; returns the chat id and status."""
        payload = {
            "bot_id": self.bot_id,
            "user_id": str(user_id),
            "stream": False,
            "additional_messages": [
                {
                    "role": "user",
                    "type": "question",
                    "content_type": "text",
                    "content": message,
                }
            ],
        }
        data = self._request(
            "POST",
            CREATE_CHAT_PATH,
            params={"conversation_id": conversation_id},
            payload=payload
        )
        return self._parse(CozeChatData, data, CREATE_CHAT_PATH)

    def retrieve_chat(self, conversation_id: str, chat_id: str) -> str:
        """Return the status of a chat (e.g. ``in_progress``, ``completed``)."""
        data = self._request(
            "GET",
            RETRIEVE_CHAT_PATH,
            params={"conversation_id": conversation_id, "chat_id": chat_id}
        )
        return self._parse(CozeChatData, data, RETRIEVE_CHAT_PATH).status

    def list_chat_messages(self, conversation_id: str, chat_id: str) -> List[Message]:
        """List the messages produced by one chat."""
        data = self._request(
            "GET",
            CHAT_MESSAGE_LIST_PATH,
            params={"conversation_id": conversation_id, "chat_id": chat_id}
        )
        return self._parse_messages(data, CHAT_MESSAGE_LIST_PATH)

    def list_conversation_messages(self, conversation_id: str) -> List[Message]:
        """List every message in a conversation."""
        data = self._request(
            "POST",
            CONVERSATION_MESSAGE_LIST_PATH,
            params={"conversation_id": conversation_id},
            payload={}
        )
        return self._parse_messages(data, CONVERSATION_MESSAGE_LIST_PATH)

    def _parse_messages(self, data: Any, path: str) -> List[Message]:
        if data is None:
            return []
        if not isinstance(data, list):
            logger.error(f"Unexpected Coze data for {path}: expected a list")
            raise UpstreamTransportError("Failed to parse external response", code=50005)
        return [self._parse(Message, item, path) for item in data]
