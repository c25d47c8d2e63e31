"""API route definitions."""

from __future__ import annotations

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request

# Keep typing imports in namespace for Pydantic annotation evaluation
__typing_imports__ = (List, Optional)

from undha import __version__
from undha.api.models import (
    EntryModel,
    HealthModel,
    LookupModel,
    SearchResponseModel,
    StatsModel,
    TranslateRequestModel,
    TranslationModel,
)
from undha.engine import (
    Direction,
    ExternalServiceError,
    InvalidInput,
    NoMatchFound,
    ResolutionEngine,
)
from undha.lexicon.models import Register

router = APIRouter()


def get_engine(request: Request) -> ResolutionEngine:
    """Resolution engine attached to the running app."""
    return request.app.state.engine


def _parse_register(value: str) -> Register:
    try:
        return Register.parse(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/health", response_model=HealthModel)
async def health_check(engine: ResolutionEngine = Depends(get_engine)):
    """Health check endpoint."""
    entries = len(engine.lexicon)
    return HealthModel(
        status="ok" if entries else "degraded",
        version=__version__,
        lexicon_entries=entries,
        responder=type(engine.responder).__name__ if engine.responder else "none",
    )


@router.post("/translate", response_model=TranslationModel)
async def translate(
    request: TranslateRequestModel,
    engine: ResolutionEngine = Depends(get_engine),
):
    """
    Resolve a phrase with the requested strategy.

    The response names the component that produced the text (`method`),
    the lexicon evidence (`matches`) and whether the hybrid strategy fell
    back to a below-threshold table answer (`degraded`).
    """
    register = _parse_register(request.speech_register)
    kwargs = {"direction": Direction(request.direction)}
    if request.timeout is not None:
        kwargs["timeout"] = request.timeout

    try:
        result = await engine.resolve(
            request.text, register, request.strategy, **kwargs
        )
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoMatchFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ExternalServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return TranslationModel(**result.to_dict())


@router.get("/lookup", response_model=LookupModel)
async def lookup(
    word: Annotated[str, Query(description="Base gloss or register form")],
    register: Annotated[
        Optional[str],
        Query(description="Target register; omitted in reverse searches all"),
    ] = None,
    reverse: Annotated[
        bool, Query(description="Look up a register form instead of a gloss")
    ] = False,
    engine: ResolutionEngine = Depends(get_engine),
):
    """Exact single-word lookup in either direction."""
    lexicon = engine.lexicon
    reg = _parse_register(register) if register else None

    if reverse:
        found = lexicon.lookup_by_register_form(word, reg)
        if found is None:
            raise HTTPException(
                status_code=404, detail=f"No base gloss for form {word!r}"
            )
        base, matched = found
        return LookupModel(
            query=word,
            register=(reg or matched).value,
            direction=Direction.REVERSE.value,
            result=base,
            matched_register=matched.value,
        )

    reg = reg or Register.PLAIN
    form = lexicon.lookup_by_base(word, reg)
    if form is None:
        raise HTTPException(
            status_code=404,
            detail=f"No {reg.value} form for {word!r}",
        )
    return LookupModel(
        query=word,
        register=reg.value,
        direction=Direction.FORWARD.value,
        result=form,
        matched_register=reg.value,
    )


@router.get("/search", response_model=SearchResponseModel)
async def search(
    q: Annotated[str, Query(description="Substring of a gloss or form")] = "",
    limit: Annotated[int, Query(ge=1, le=500)] = 50,
    engine: ResolutionEngine = Depends(get_engine),
):
    """Case-insensitive containment search across glosses and forms."""
    entries = engine.lexicon.search(q)
    return SearchResponseModel(
        query=q,
        count=len(entries),
        entries=[EntryModel(**e.to_dict()) for e in entries[:limit]],
    )


@router.get("/stats", response_model=StatsModel)
async def stats(engine: ResolutionEngine = Depends(get_engine)):
    """Lexicon summary counts."""
    return StatsModel(**engine.lexicon.stats().to_dict())
