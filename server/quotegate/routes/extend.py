# ─────────────────────────────────────────────────────────────────────────────
# POST /api/extend-quote — quote extension endpoint (THIN)
# ─────────────────────────────────────────────────────────────────────────────


from fastapi import APIRouter, Depends, Request

from quotegate.dependencies import get_client_identifier, get_orchestrator
from quotegate.exceptions import ErrorOutcome, QuoteGatewayError
from quotegate.schemas import ErrorResponse, ExtensionRequest, ExtensionResult
from quotegate.services.pipeline import RequestOrchestrator

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Malformed, empty or too-long quote"},
    429: {"model": ErrorResponse, "description": "Rate limit exceeded; see Retry-After"},
    500: {"model": ErrorResponse, "description": "Provider or configuration failure"},
    504: {"model": ErrorResponse, "description": "Provider did not answer in time"},
}


@router.post(
    "/api/extend-quote",
    response_model=ExtensionResult,
    responses=_ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": ExtensionRequest.model_json_schema(by_alias=True)
                }
            },
        }
    },
)
async def extend_quote(
    request: Request,
    client_identifier: str = Depends(get_client_identifier),
    orchestrator: RequestOrchestrator = Depends(get_orchestrator),
) -> ExtensionResult:
    """Extend a quote with a continuation that inverts its meaning.

    The raw body goes to the orchestrator untouched so malformed JSON gets
    the gateway's own 400 rather than FastAPI's 422.
    Errors are exceptions. Logic is in the orchestrator.
    This endpoint is just wiring.
    """
    raw = await request.body()
    result = await orchestrator.handle(raw, client_identifier)
    if isinstance(result, ErrorOutcome):
        raise QuoteGatewayError(result)
    return result
