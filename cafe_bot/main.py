"""
FastAPI Application Entry Point

Café Pickup Ordering Bot - WhatsApp ordering over Twilio Messaging.
Supports both the mock notification service (development) and Twilio
(production).

Endpoints:
    - POST /twilio/inbound: Twilio incoming message webhook (TwiML reply)
    - POST /twilio/status: Twilio delivery status callback
    - POST /webhook/simulation: Local testing endpoint (JSON)
    - GET /healthz: Liveness check

Author: Café Pickup Bot Team
Version: 3.0.0
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from twilio.twiml.messaging_response import MessagingResponse

from cafe_bot.conversation import ConversationEngine, get_conversation_engine
from cafe_bot.core.config import get_settings, setup_logging
from cafe_bot.schemas import ErrorResponse, ServiceInfo, SimulationMessage, SimulationReply
from cafe_bot.scheduling import format_clock, format_weekdays

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    engine = get_conversation_engine()
    policy = engine.resolver.policy
    logger.info(f"✅ Notification Service: {engine.notification_service.provider_name}")
    logger.info(
        f"✅ Pickup: {format_weekdays(policy.open_weekdays)} "
        f"{format_clock(policy.window_start)}-{format_clock(policy.window_end)} "
        f"({policy.timezone.key}, lead {settings.min_lead_minutes} min)"
    )

    # Validate production config
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "WhatsApp pickup ordering for a small café: pickup time, order, "
        "payment method and confirmation, with owner notification."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", response_model=ServiceInfo, tags=["Root"])
async def root() -> ServiceInfo:
    """API root with navigation links."""
    return ServiceInfo(
        message=f"☕ Welcome to {settings.app_name}",
        version=settings.app_version,
        environment=settings.env_mode.value,
    )


@app.get("/healthz", response_class=PlainTextResponse, tags=["Health"])
async def healthz() -> str:
    """Liveness check."""
    return "ok"


# =============================================================================
# TWILIO WEBHOOK ENDPOINTS
# =============================================================================

@app.post(
    "/twilio/inbound",
    tags=["Twilio Webhook"],
    summary="Incoming WhatsApp message",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def twilio_inbound(
    request: Request,
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> Response:
    """
    Handle an incoming message webhook from Twilio.

    Twilio posts form fields; ``From`` identifies the customer and
    ``Body`` carries the text. Replies are returned as TwiML, one
    <Message> per reply segment.

    Configure this URL as the WhatsApp sender's webhook:
        https://your-domain.com/twilio/inbound
    """
    form = await request.form()
    customer_id = str(form.get("From", "")).strip()
    body = str(form.get("Body", ""))

    if not customer_id:
        raise HTTPException(status_code=400, detail="Missing 'From' field")

    logger.info(f"Inbound message from {customer_id}")
    logger.debug(f"Body: {body!r}")

    replies = await engine.handle_message(customer_id, body)

    twiml = MessagingResponse()
    for reply in replies:
        twiml.message(reply)

    return Response(content=str(twiml), media_type="application/xml")


@app.post(
    "/twilio/status",
    response_class=PlainTextResponse,
    tags=["Twilio Webhook"],
    summary="Message status callback",
)
async def twilio_status(request: Request) -> str:
    """Log delivery status updates for outbound messages."""
    form = await request.form()
    logger.info(
        f"Message status: sid={form.get('MessageSid', 'unknown')} "
        f"status={form.get('MessageStatus', 'unknown')}"
    )
    if form.get("ErrorCode"):
        logger.warning(f"Delivery error {form.get('ErrorCode')} for {form.get('To', 'unknown')}")
    return "OK"


@app.post(
    "/webhook/simulation",
    response_model=SimulationReply,
    tags=["Simulation"],
    summary="Simulation Webhook (Development)",
    responses={403: {"model": ErrorResponse}},
)
async def simulation_webhook(
    message: SimulationMessage,
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> SimulationReply:
    """
    Simulation endpoint for local testing.

    Runs the same conversation engine as /twilio/inbound but takes and
    returns JSON, so the flow can be tested without a Twilio account.

    Use scripts/simulate.py to drive conversations against this endpoint.
    """
    if not settings.is_development:
        raise HTTPException(
            status_code=403,
            detail="Simulation endpoint only available in development mode"
        )

    logger.info(f"Simulation message from {message.sender}")
    replies = await engine.handle_message(message.sender, message.body)
    return SimulationReply(replies=replies)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    uvicorn.run(
        "cafe_bot.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="debug" if settings.debug else "info",
    )
