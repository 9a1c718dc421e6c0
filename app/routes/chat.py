import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.dependency import get_db
from app.models.chat import ChatMessage, ChatSession
from app.models.enums import MessageSender
from app.models.user import User
from app.schemas.chat import ChatHistory, ChatRequest, ChatResponse
from app.services.targets import get_owned
from app.utils.ai_webhook import AIWebhookClient, get_chat_client
from app.utils.auth import get_current_user

router = APIRouter()
logger = logging.getLogger(__name__)

@router.post("", response_model=ChatResponse)
def chat(
    payload: ChatRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    client: AIWebhookClient = Depends(get_chat_client),
):
    if payload.conversation_id is not None:
        session = get_owned(db, ChatSession, payload.conversation_id, current_user.id, "Conversation")
    else:
        session = ChatSession(user_id=current_user.id)
        db.add(session)
        db.flush()

    # nothing is stored when the assistant fails
    answer = client.ask(payload.question, session.id, current_user.id)

    db.add(ChatMessage(session_id=session.id, sender=MessageSender.USER, content=payload.question))
    db.add(ChatMessage(session_id=session.id, sender=MessageSender.AI, content=answer))
    db.commit()
    logger.info(f"Chat answer stored in conversation {session.id}")
    return {"text": answer, "conversation_id": session.id}

@router.get("/{conversation_id}", response_model=ChatHistory)
def get_conversation(
    conversation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    session = get_owned(db, ChatSession, conversation_id, current_user.id, "Conversation")
    return {"conversation_id": session.id, "messages": session.messages}
