"""Keywords API router -- inspect and mutate the tracked keyword set.

Changes take effect at the next cycle; a cycle already running keeps the
snapshot it started with.
"""

from fastapi import APIRouter, Depends, HTTPException, Request

from newsradar.api.dependencies import Keywords, verify_api_key
from newsradar.api.ratelimit import api_rate_limit, limiter
from newsradar.api.schemas import (
    KeywordListResponse, KeywordMutationRequest, KeywordMutationResponse, KeywordResponse,
)
from newsradar.schemas import KeywordCategory, MutationStatus

router = APIRouter()


@router.get("", response_model=KeywordListResponse)
@limiter.limit(api_rate_limit)
async def list_keywords(request: Request, keywords: Keywords):
    entries = keywords.entries()
    return KeywordListResponse(
        count=len(entries),
        keywords=[KeywordResponse.from_entry(e) for e in entries],
        by_category={c.value: keywords.by_category(c) for c in KeywordCategory},
    )


@router.post(
    "",
    response_model=KeywordMutationResponse,
    dependencies=[Depends(verify_api_key)],
)
@limiter.limit(api_rate_limit)
async def add_keywords(request: Request, body: KeywordMutationRequest, keywords: Keywords):
    results = keywords.add_many(body.terms, body.category)
    if all(r.status == MutationStatus.INVALID for r in results):
        raise HTTPException(status_code=422, detail=results[0].message)
    return KeywordMutationResponse(results=results, tracked=len(keywords))


@router.delete(
    "/{term}",
    response_model=KeywordMutationResponse,
    dependencies=[Depends(verify_api_key)],
)
@limiter.limit(api_rate_limit)
async def remove_keyword(request: Request, term: str, keywords: Keywords):
    result = keywords.remove(term)
    if result.status == MutationStatus.INVALID:
        raise HTTPException(status_code=422, detail=result.message)
    if result.status == MutationStatus.NOT_FOUND:
        raise HTTPException(status_code=404, detail=result.message)
    return KeywordMutationResponse(results=[result], tracked=len(keywords))
