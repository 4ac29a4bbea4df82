import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..schemas import AggregationRequest, AggregationResponse, ErrorResponse
from ..services.aggregation_service import AggregationService
from ..data.sources import source_names
from ..core.errors import ConfigurationError, ValidationError
from ..core.security import require_api_token

logger = logging.getLogger(__name__)

router = APIRouter()

def service_dep(request: Request) -> AggregationService:
    # Cheap factory; the extractor and log are built once in create_app
    state = request.app.state
    return AggregationService(state.extractor, state.valuation_log)

@router.post(
    "/aggregate",
    response_model=AggregationResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def post_aggregate(
    body: AggregationRequest,
    _auth = Depends(require_api_token),     # Static bearer token
    svc: AggregationService = Depends(service_dep),
):
    try:
        return await svc.aggregate(body.address, body.session_id)
    except (ValidationError, ConfigurationError):
        raise  # rendered by the app-level handlers
    except Exception as exc:
        logger.exception("aggregation failed")
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})

@router.get("/sources")
def get_sources(_auth = Depends(require_api_token)):
    return {"sources": source_names()}
