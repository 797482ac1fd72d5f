from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from deps.gateway import get_gateway
from gateway import ModelGateway
from pipeline import correct_test
from schemas.correction import AnalysisRequest, AnalyzeResponse

router = APIRouter(prefix="/api", tags=["analysis"])


# Plain def: FastAPI runs it in the threadpool, so the blocking model calls
# do not hold up the event loop.
@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(
    req: AnalysisRequest,
    gateway: Annotated[ModelGateway, Depends(get_gateway)],
):
    result = correct_test(gateway, req)
    return {"result": result}
