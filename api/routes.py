"""
askbase API Routes
==================
Endpoints that connect the transport to the shared resolver.
"""

from typing import Any, Dict

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from reasoning import ResponseResolver

router = APIRouter()


def get_resolver() -> ResponseResolver:
    """Get the resolver from the server module"""
    from . import server
    resolver = server.get_components().get('resolver')
    if resolver is None:
        raise HTTPException(status_code=503, detail="Engine not initialized")
    return resolver


# ============================================================
# REQUEST/RESPONSE MODELS
# ============================================================

class Question(BaseModel):
    text: str


class AIResponse(BaseModel):
    answer: str


class LearnRequest(BaseModel):
    question: str
    answer: str


class LearnResponse(BaseModel):
    success: bool


# ============================================================
# ENDPOINTS
# ============================================================

# Plain def endpoints run in the thread pool, one request per worker thread
@router.post("/ai", response_model=AIResponse)
def ask(question: Question) -> AIResponse:
    """Answer a free-text question"""
    return AIResponse(answer=get_resolver().resolve(question.text))


@router.post("/learn", response_model=LearnResponse)
def learn(request: LearnRequest) -> LearnResponse:
    """Teach an answer for the exact question text"""
    return LearnResponse(success=get_resolver().learn(request.question, request.answer))


@router.get("/api/stats")
def get_stats() -> Dict[str, Any]:
    """Knowledge base, memory and embedding statistics"""
    return get_resolver().get_stats()


@router.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}
