from fastapi import FastAPI, Depends, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from pydantic import EmailStr
from contextlib import asynccontextmanager
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# Local imports
from config import Settings, setup_logging
from database import get_db, engine
from dtos.chat_request import ConversationCreateRequest, ChatRequest
from exceptions import AppError, AuthError, DuplicateError, NotFoundError, OwnershipError, RoleError, ValidationError
from models import Base
from schemas import (
    Report, SUCCESS_CODE,
    UserCreate, UserLogin, UserResponse, LoginResponse, TokenClaims,
    ConversationResponse, ConversationCreateResponse, ConversationListResponse,
    ChatCreateResponse, ChatStatusResponse, MessageListResponse
)
from services import AuthService, UserService, TokenService, ConversationService, CozeClient
from sqlalchemy.orm import Session

USER_ROLE = "user"

settings = Settings.from_env()
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables if they don't exist
    Base.metadata.create_all(bind=engine)

    app.state.token_service = TokenService(settings)
    app.state.coze_client = CozeClient(settings)
    logger.info(f"Coze proxy ready for bot {settings.coze_bot_id} at {settings.coze_api_base}")

    yield

    app.state.coze_client.close()


app = FastAPI(
    title="Coze Chat Backend",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
    max_age=3600
)


# Error responses
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=Report(code=exc.code, result=exc.result).model_dump(),
        headers=headers
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Invalid request to {request.url.path}: {exc.errors()}")
    error = ValidationError()
    return JSONResponse(
        status_code=error.status_code,
        content=Report(code=error.code, result=error.message).model_dump()
    )


@app.get("/ping")
async def ping():
    return Report(code=SUCCESS_CODE, result={"message": "pong"})


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "coze-chat-backend"}


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_coze_client(request: Request) -> CozeClient:
    return request.app.state.coze_client


# Bearer auth; missing headers are reported through our own error envelope
bearer_scheme = HTTPBearer(auto_error=False)


def require_role(role: str):
    """Build a dependency that validates the bearer token and resolves its claims."""

    def get_current_claims(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        token_service: TokenService = Depends(get_token_service)
    ) -> TokenClaims:
        if credentials is None or not credentials.credentials:
            raise AuthError("Unauthorized: missing bearer token")

        try:
            claims = token_service.validate(credentials.credentials)
        except AuthError as e:
            logger.info(f"Rejected token: {e.message}")
            raise

        if claims.role != role:
            logger.info(f"Rejected token for user {claims.subject_id}: role {claims.role!r}")
            raise RoleError()

        return claims

    return get_current_claims


require_user = require_role(USER_ROLE)


# Authentication endpoints
@app.post("/auth/register")
def register(
    user_data: UserCreate,
    db: Session = Depends(get_db)
) -> Report:
    """Register a new user."""
    if UserService.exists_by_email(db, user_data.email):
        raise DuplicateError()

    user = UserService.create_user(
        db,
        username=user_data.username,
        email=user_data.email,
        hashed_password=AuthService.hash_password(user_data.password)
    )
    logger.info(f"Registered user {user.id}")

    return Report(code=SUCCESS_CODE, result=UserResponse.model_validate(user))


@app.post("/auth/login")
def login(
    credentials: UserLogin,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service)
) -> Report:
    """Login with email and password."""
    user = AuthService.authenticate_user(db, credentials.email, credentials.password)
    token = token_service.issue(user.id, USER_ROLE)
    logger.info(f"User {user.id} logged in")

    return Report(
        code=SUCCESS_CODE,
        result=LoginResponse(user=UserResponse.model_validate(user), token=token)
    )


# User endpoints
@app.get("/user/{user_id}")
def get_user_by_id(
    user_id: int,
    claims: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db)
) -> Report:
    """Get a user's own record by id."""
    if not AuthService.assert_owner(claims.subject_id, user_id):
        raise OwnershipError()

    user = UserService.get_user_by_id(db, user_id)
    if not user:
        raise NotFoundError(code=40007)

    return Report(code=SUCCESS_CODE, result=UserResponse.model_validate(user))


@app.get("/user")
def get_user_by_email(
    email: EmailStr = Query(...),
    claims: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db)
) -> Report:
    """Get a user's own record by email."""
    user = UserService.get_user_by_email(db, email)
    if not user:
        raise NotFoundError(code=40008)

    if not AuthService.assert_owner(claims.subject_id, user.id):
        raise OwnershipError()

    return Report(code=SUCCESS_CODE, result=UserResponse.model_validate(user))


# Coze proxy endpoints
@app.post("/coze/conversation", response_model=ConversationCreateResponse)
def create_conversation(
    req: ConversationCreateRequest,
    claims: TokenClaims = Depends(require_user),
    coze: CozeClient = Depends(get_coze_client),
    db: Session = Depends(get_db)
) -> ConversationCreateResponse:
    """
    Create a Coze conversation and record the caller as its owner.

    If Coze succeeds but saving fails, the Coze conversation is left without a
    local record and the caller gets a 500.
    """
    conversation_id = coze.create_conversation(bot_id=req.bot_id, name=req.name)

    ConversationService.create_conversation(
        db=db,
        user_id=claims.subject_id,
        conversation_id=conversation_id,
        name=req.name
    )
    logger.info(f"User {claims.subject_id} created conversation {conversation_id}")

    return ConversationCreateResponse(conversation_id=conversation_id)


@app.get("/coze/conversation", response_model=ConversationListResponse)
def list_conversations(
    claims: TokenClaims = Depends(require_user),
    db: Session = Depends(get_db)
) -> ConversationListResponse:
    """List all conversations owned by the caller."""
    conversations = ConversationService.get_user_conversations(db, claims.subject_id)

    return ConversationListResponse(
        conversations=[ConversationResponse.model_validate(c) for c in conversations]
    )


@app.get("/coze/conversation/message", response_model=MessageListResponse)
def list_conversation_messages(
    conversation_id: str = Query(..., min_length=1),
    claims: TokenClaims = Depends(require_user),
    coze: CozeClient = Depends(get_coze_client),
    db: Session = Depends(get_db)
) -> MessageListResponse:
    """List every message of a conversation the caller owns."""
    conversation = ConversationService.get_conversation(db, conversation_id)
    if not conversation or not AuthService.assert_owner(claims.subject_id, conversation.user_id):
        raise OwnershipError()

    return MessageListResponse(messages=coze.list_conversation_messages(conversation_id))


@app.post("/coze/chat", response_model=ChatCreateResponse)
def create_chat(
    req: ChatRequest,
    claims: TokenClaims = Depends(require_user),
    coze: CozeClient = Depends(get_coze_client)
) -> ChatCreateResponse:
    """Send a message to a conversation. The reply is produced asynchronously by Coze."""
    chat = coze.create_chat(
        user_id=claims.subject_id,
        conversation_id=req.conversation_id,
        message=req.message
    )

    return ChatCreateResponse(chat_id=chat.id, status=chat.status)


@app.get("/coze/chat", response_model=ChatStatusResponse)
def retrieve_chat(
    conversation_id: str = Query(..., min_length=1),
    chat_id: str = Query(..., min_length=1),
    claims: TokenClaims = Depends(require_user),
    coze: CozeClient = Depends(get_coze_client)
) -> ChatStatusResponse:
    """Poll the status of a chat."""
    return ChatStatusResponse(status=coze.retrieve_chat(conversation_id, chat_id))


@app.get("/coze/chat/message", response_model=MessageListResponse)
def list_chat_messages(
    conversation_id: str = Query(..., min_length=1),
    chat_id: str = Query(..., min_length=1),
    claims: TokenClaims = Depends(require_user),
    coze: CozeClient = Depends(get_coze_client)
) -> MessageListResponse:
    """List the messages produced by a chat."""
    return MessageListResponse(messages=coze.list_chat_messages(conversation_id, chat_id))
