"""
Intent Router - API endpoint for natural language commands.

This router handles /intent, the entry point used by the voice and chat
layers. It only does HTTP handling; classification, dispatch and the
chat relay live in their own modules.

Architecture:
=============
```
┌─────────────────┐
│ "play despacito │
│  song"          │
└────────┬────────┘
         │
         ▼
┌─────────────────┐
│  Intent Router  │  ← HTTP handling only (this file)
└────────┬────────┘
         │
         ▼
┌─────────────────┐      None      ┌─────────────────┐
│ AutomationSvc   │ ─────────────► │   Chat relay    │
│   .dispatch()   │                │                 │
└─────────────────┘                └─────────────────┘
```
"""

import logging
import time
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from voicepilot.ai.intent.schemas import IntentEnvelope, IntentType
from voicepilot.deps import AutomationContainer, get_container
from voicepilot.services.chat_relay import ChatRelayError
from voicepilot.services.errors import HandlerException
from voicepilot.services.monitoring import automation_logger
from voicepilot.services.responses import generate_automation_response

logger = logging.getLogger("voicepilot.routers.intent")

router = APIRouter(prefix="/intent", tags=["intent"])


# ---------------------------------------------------------------------------
# REQUEST/RESPONSE SCHEMAS
# ---------------------------------------------------------------------------

class IntentRequest(BaseModel):
    """
    Request schema for the /intent endpoint.

    Example:
    {
        "text": "search iPhone on amazon",
        "conversation_history": [{"role": "user", "content": "hi"}]
    }
    """
    text: str = Field(..., min_length=1, max_length=500, description="What the user said or typed")
    conversation_history: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Recent transcript turns, forwarded to the chat responder",
    )


class ClassifyRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=500)


class IntentResponse(BaseModel):
    """
    Response schema for the /intent endpoint.

    Example:
    {
        "success": true,
        "intent_type": "shopping",
        "handled_by": "automation",
        "action": "shopping_opened",
        "message": "🛒 Searching for \"iPhone\" on Amazon. ...",
        "response": "Perfect! 🛒 Searching for \"iPhone\" on Amazon. ...",
        "window_id": "1760870400000"
    }
    """
    success: bool
    intent_type: str
    handled_by: str = Field(description='"automation" or "conversation"')
    action: Optional[str] = None
    message: str
    response: Optional[str] = Field(default=None, description="Text to show or speak")
    window_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    processing_time_ms: Optional[float] = None
    request_id: Optional[str] = None


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post("", response_model=IntentResponse)
async def process_intent(
    request: IntentRequest,
    container: AutomationContainer = Depends(get_container),
):
    """
    Classify an utterance and act on it.

    Automations run and return an acknowledgement. Anything else is
    relayed to the chat responder and its reply is returned. A failed
    automation is reported with success=false and the error as message.

    **Examples:**
    - "play Shape of You by Ed Sheeran"
    - "search iPhone on amazon"
    - "stop the music"
    - "hello, how are you"
    """
    start_time = time.time()
    request_id = str(uuid.uuid4())

    intent = container.classifier.classify(request.text)
    automation_logger.log_classification(request.text, intent.intent_type.value)

    def elapsed() -> float:
        return round((time.time() - start_time) * 1000, 2)

    try:
        result = await container.service.dispatch(intent)
    except HandlerException as e:
        return IntentResponse(
            success=False,
            intent_type=intent.intent_type.value,
            handled_by="automation",
            message=str(e),
            processing_time_ms=elapsed(),
            request_id=request_id,
        )
    except Exception as e:
        logger.error(f"Failed to process intent: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process intent: {str(e)}",
        )

    if result is None:
        try:
            reply = await container.chat_relay.send_message(request.text, request.conversation_history)
        except ChatRelayError as e:
            return IntentResponse(
                success=False,
                intent_type=IntentType.CONVERSATION.value,
                handled_by="conversation",
                message=str(e),
                processing_time_ms=elapsed(),
                request_id=request_id,
            )
        return IntentResponse(
            success=True,
            intent_type=IntentType.CONVERSATION.value,
            handled_by="conversation",
            message=reply,
            response=reply,
            processing_time_ms=elapsed(),
            request_id=request_id,
        )

    return IntentResponse(
        success=result.success,
        intent_type=intent.intent_type.value,
        handled_by="automation",
        action=result.action,
        message=result.message,
        response=generate_automation_response(intent, result),
        window_id=result.window_id,
        metadata=result.metadata,
        processing_time_ms=elapsed(),
        request_id=request_id,
    )


@router.post("/classify", response_model=IntentEnvelope)
async def classify_intent(
    request: ClassifyRequest,
    container: AutomationContainer = Depends(get_container),
):
    """Classify without acting. Useful for debugging the rule order."""
    return IntentEnvelope(intent=container.classifier.classify(request.text))
