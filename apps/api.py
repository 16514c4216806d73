"""FastAPI application exposing the quiz catalog as a REST API."""

from __future__ import annotations

import asyncio
import logging
import os
from functools import lru_cache
from typing import Any, Dict, List

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from quiz_catalog.catalog.models import Quiz, parse_quiz
from quiz_catalog.catalog.registry import QuizRegistry
from quiz_catalog.config import load_settings
from quiz_catalog.errors import InvalidArgumentError
from quiz_catalog.system import QuizSystem

logger = logging.getLogger(__name__)

settings = load_settings(os.getenv("QUIZ_CATALOG_CONFIG"))


@lru_cache(maxsize=1)
def _get_system() -> QuizSystem:
    """Create the single QuizSystem shared by every request."""
    logger.info("Initializing QuizSystem for FastAPI service")
    return QuizSystem(settings)


async def get_registry() -> QuizRegistry:
    """FastAPI dependency that returns the shared QuizRegistry."""
    return _get_system().registry


def _quiz_from_body(payload: Any) -> Quiz:
    validation = parse_quiz(payload)
    if not validation.ok:
        raise HTTPException(status_code=422, detail=str(validation.error))
    return validation.value


async def _call(func, *args):
    """Run a blocking registry call off the event loop, mapping caller errors to 422."""
    try:
        return await asyncio.to_thread(func, *args)
    except InvalidArgumentError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


app = FastAPI(
    title="Quiz Catalog API",
    description="REST API for browsing and editing the quiz catalog",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("shutdown")
async def _shutdown_event() -> None:
    """Close the provider session if a QuizSystem was created."""
    if _get_system.cache_info().currsize:
        _get_system().close()
        logger.info("QuizSystem closed")


@app.get("/health", summary="Health check")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/categories", response_model=List[str], summary="List categories")
async def list_categories(registry: QuizRegistry = Depends(get_registry)) -> List[str]:
    return await _call(registry.list_categories)


@app.get("/quizzes", response_model=List[str], summary="List quiz titles in a category")
async def list_quizzes(
    category: str = Query(...),
    registry: QuizRegistry = Depends(get_registry),
) -> List[str]:
    return await _call(registry.list_quizzes, category)


@app.get("/quiz", summary="Fetch a quiz; random quizzes are regenerated first")
async def get_quiz(
    category: str = Query(...),
    title: str = Query(...),
    registry: QuizRegistry = Depends(get_registry),
) -> Dict[str, Any]:
    payload = await _call(registry.export_quiz, category, title)
    if payload is None:
        raise HTTPException(status_code=404, detail=f"No quiz '{title}' in '{category}'")
    return payload


@app.post("/quiz", response_model=bool, summary="Add a custom quiz")
async def add_quiz(
    payload: Any = Body(...),
    registry: QuizRegistry = Depends(get_registry),
) -> bool:
    quiz = _quiz_from_body(payload)
    return await _call(registry.add_quiz, quiz)


@app.delete("/quiz", response_model=bool, summary="Remove a custom quiz")
async def remove_quiz(
    category: str = Query(...),
    title: str = Query(...),
    registry: QuizRegistry = Depends(get_registry),
) -> bool:
    return await _call(registry.remove_quiz, category, title)


@app.put("/quiz", response_model=bool, summary="Replace a custom quiz")
async def edit_quiz(
    category: str = Query(...),
    title: str = Query(...),
    payload: Any = Body(...),
    registry: QuizRegistry = Depends(get_registry),
) -> bool:
    quiz = _quiz_from_body(payload)
    return await _call(registry.edit_quiz, category, title, quiz)
