# ============================================================
# OncoGuide FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Keyword retrieval over the chunk corpus (SQLite FTS5)
#   - Patient profile + conversation history context
#   - Together / Groq / Ollama / Echo generation with failover
# ============================================================

from contextlib import asynccontextmanager
import logging
import uuid

from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from pydantic import BaseModel
from typing import List, Optional, Dict, Any

# --- Local imports ---
from oncoguide.settings import settings
from oncoguide.logging import configure_logging, request_id_var
from oncoguide.generate.generator import GenerationError
from oncoguide.generate.prompts import normalize_length
from oncoguide.pipeline import ChatPipeline, InvalidQueryError, build_pipeline
from oncoguide.search.classifier import classify_query_type
from oncoguide.search.retriever import limit_for

configure_logging()
logger = logging.getLogger("oncoguide")


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting %s (env=%s)", settings.APP_NAME, settings.ENV)
    app.state.pipeline = build_pipeline(settings)
    yield
    app.state.pipeline.retriever.backend.close()
    logger.info("%s shutdown complete", settings.APP_NAME)


app = FastAPI(title="OncoGuide API", version="0.1", lifespan=lifespan)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
    request_id_var.set(request_id)
    response = await call_next(request)
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def get_pipeline(request: Request) -> ChatPipeline:
    return request.app.state.pipeline


# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class ChatRequest(BaseModel):
    message: Optional[str] = None
    response_length: Optional[str] = "normal"
    session_id: Optional[str] = "default"

class ChatPayload(BaseModel):
    answer: str
    api_used: str
    retrieved_count: int
    patient_context_used: bool
    query_type: str
    is_urgent: bool

class RetrieveResponse(BaseModel):
    query: str
    query_type: str
    chunks: List[Dict[str, Any]]

# ------------------------------------------------------------
# 💬 Main chat route
# ------------------------------------------------------------
@app.post("/chat", response_model=ChatPayload)
def chat(
    req: ChatRequest,
    pipeline: ChatPipeline = Depends(get_pipeline),
    x_user_id: str = Header(default="anonymous"),
):
    try:
        result = pipeline.answer(
            message=req.message,
            response_length=req.response_length or "normal",
            session_id=req.session_id or "default",
            user_id=x_user_id,
        )
    except InvalidQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except GenerationError:
        raise HTTPException(status_code=500, detail="Failed to generate a response")
    except Exception:
        logger.exception("Chat pipeline error")
        raise HTTPException(status_code=500, detail="Internal server error")
    return ChatPayload(**result.to_dict())

# ------------------------------------------------------------
# 🔎 Retrieval-only route
# ------------------------------------------------------------
@app.get("/retrieve", response_model=RetrieveResponse)
def retrieve_endpoint(
    q: str = Query(..., description="Search query"),
    response_length: str = "normal",
    pipeline: ChatPipeline = Depends(get_pipeline),
):
    query_type = classify_query_type(q)
    chunks = pipeline.retriever.retrieve_chunks(q, query_type, limit_for(normalize_length(response_length)))
    docs = [{"id": c.id, "text": c.text, "score": c.score, "strategy": c.strategy} for c in chunks]
    return {"query": q, "query_type": query_type.value, "chunks": docs}

# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "env": settings.ENV,
        "debug": settings.DEBUG,
        "app": settings.APP_NAME,
    }

@app.get("/health")
def health():
    return {"status": "ok", "env": settings.ENV}

@app.get("/")
def hello():
    return {"message": f"{settings.APP_NAME} service running."}
