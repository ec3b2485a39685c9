"""Mini README: FastAPI wrapper exposing the relief ledger over HTTP.

Structure:
    * Request bodies - pydantic models for the JSON payloads.
    * create_application - application factory wiring routes to a ledger.

The host authenticates callers and forwards the resulting identity in the
``X-Caller-Identity`` header; the wrapper never decides who may do what,
it only maps requests onto ledger operations and ledger errors onto JSON
error responses. Routes that touch the ledger are plain functions so
FastAPI runs them in its threadpool; the ledger lock and the payout hook
block a worker thread, never the event loop. Amounts are strict integers,
so JSON booleans are rejected before they reach the ledger.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Header, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, StrictInt

from ..configuration import get_settings
from ..ledger import EventLog, LedgerError, ReliefLedger
from ..logging_utils import get_logger

LOGGER = get_logger(__name__)

CALLER_HEADER = "X-Caller-Identity"


class CampaignBody(BaseModel):
    name: str
    location: str
    description: str = ""
    target_amount: StrictInt


class AmountBody(BaseModel):
    amount: StrictInt = Field(..., description="Value in the smallest currency unit.")


class ReliefRequestBody(BaseModel):
    campaign_id: StrictInt
    resource_type: str
    quantity: StrictInt
    urgency_level: str = ""


class CoordinatorBody(BaseModel):
    identity: str


def _build_default_ledger() -> ReliefLedger:
    settings = get_settings()
    return ReliefLedger(
        settings.owner_identity,
        events=EventLog(history_limit=settings.event_history_limit),
    )


def create_application(ledger: Optional[ReliefLedger] = None) -> FastAPI:
    """Create the FastAPI application bound to ``ledger`` (or a fresh one)."""

    app = FastAPI(title="Relief Ledger", version="0.1.0")
    ledger = ledger or _build_default_ledger()
    app.state.ledger = ledger

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, error: LedgerError) -> JSONResponse:
        LOGGER.debug("%s %s -> %s", request.method, request.url.path, error.kind)
        return JSONResponse(
            status_code=error.status_code,
            content={"error": error.kind, "detail": str(error)},
        )

    @app.post("/campaigns", status_code=201)
    def register_campaign(
        body: CampaignBody, caller: str = Header(..., alias=CALLER_HEADER)
    ) -> JSONResponse:
        """Register a campaign coordinated by the caller."""

        disaster = ledger.register_campaign(
            body.name, body.location, body.description, body.target_amount, caller
        )
        return JSONResponse(disaster.as_dict(), status_code=201)

    @app.get("/campaigns")
    def list_campaigns() -> JSONResponse:
        campaigns = [disaster.as_dict() for disaster in ledger.list_campaigns()]
        return JSONResponse({"campaigns": campaigns})

    @app.get("/campaigns/{campaign_id}")
    def get_campaign(campaign_id: int) -> JSONResponse:
        return JSONResponse(ledger.get_campaign(campaign_id).as_dict())

    @app.get("/campaigns/{campaign_id}/donations/count")
    def donation_count(campaign_id: int) -> JSONResponse:
        return JSONResponse(
            {"campaign_id": campaign_id, "count": ledger.donation_count(campaign_id)}
        )

    @app.post("/campaigns/{campaign_id}/contributions", status_code=201)
    def contribute(
        campaign_id: int,
        body: AmountBody,
        caller: str = Header(..., alias=CALLER_HEADER),
    ) -> JSONResponse:
        """Accept a contribution; the host attaches the value being sent."""

        donation = ledger.contribute(campaign_id, body.amount, caller)
        return JSONResponse(donation.as_dict(), status_code=201)

    @app.post("/campaigns/{campaign_id}/withdrawals")
    def withdraw(
        campaign_id: int,
        body: AmountBody,
        caller: str = Header(..., alias=CALLER_HEADER),
    ) -> JSONResponse:
        disaster = ledger.withdraw(campaign_id, body.amount, caller)
        return JSONResponse(
            {"campaign": disaster.as_dict(), "withdrawn": body.amount}
        )

    @app.post("/campaigns/{campaign_id}/deactivate")
    def deactivate_campaign(
        campaign_id: int, caller: str = Header(..., alias=CALLER_HEADER)
    ) -> JSONResponse:
        return JSONResponse(ledger.deactivate_campaign(campaign_id, caller).as_dict())

    @app.post("/requests", status_code=201)
    def submit_request(
        body: ReliefRequestBody, caller: str = Header(..., alias=CALLER_HEADER)
    ) -> JSONResponse:
        """Record a relief request; any authenticated identity may submit."""

        relief_request = ledger.submit_request(
            body.campaign_id,
            body.resource_type,
            body.quantity,
            body.urgency_level,
            caller,
        )
        return JSONResponse(relief_request.as_dict(), status_code=201)

    @app.get("/requests/{request_id}")
    def get_request(request_id: int) -> JSONResponse:
        return JSONResponse(ledger.get_request(request_id).as_dict())

    @app.post("/requests/{request_id}/fulfil")
    def fulfill_request(
        request_id: int, caller: str = Header(..., alias=CALLER_HEADER)
    ) -> JSONResponse:
        return JSONResponse(ledger.fulfill_request(request_id, caller).as_dict())

    @app.post("/coordinators")
    def authorize_coordinator(
        body: CoordinatorBody, caller: str = Header(..., alias=CALLER_HEADER)
    ) -> JSONResponse:
        ledger.authorize_coordinator(body.identity, caller)
        return JSONResponse({"identity": body.identity, "authorized": True})

    @app.get("/ledger")
    def ledger_summary() -> JSONResponse:
        """Return the reserve and aggregate totals."""

        return JSONResponse(ledger.summarise())

    @app.get("/events")
    def list_events(name: Optional[str] = None) -> JSONResponse:
        events = [event.as_dict() for event in ledger.events.history(name)]
        LOGGER.debug("Returning %s events", len(events))
        return JSONResponse({"events": events})

    return app
