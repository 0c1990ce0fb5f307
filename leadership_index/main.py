import logging
from datetime import datetime, timezone
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from starlette.concurrency import run_in_threadpool

from leadership_index.config import Settings, settings
from leadership_index.delivery import DeliveryError, DeliveryGateway
from leadership_index.dimensions import CLOSING_PROMPTS, DIMENSIONS, SCALE, SCALE_LABELS, catalog_payload
from leadership_index.email import MailConfigurationError, build_transport, format_sender
from leadership_index.logging_config import setup_logging
from leadership_index.reports import build_reports
from leadership_index.schemas import ScoreRequest, SubmissionIn, SubmissionValidationError, validate_submission
from leadership_index.scoring import BAND_LEGEND, calculate_scores

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent

DELIVERY_FAILED_MESSAGE = "Email service temporarily unavailable"
INVALID_PAYLOAD_MESSAGE = "Invalid submission payload"

app = FastAPI(title="Leadership Team Index")
app.mount("/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static")
templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))


def build_gateway(config: Settings) -> DeliveryGateway:
    """
    Outside production a bad provider setting yields a gateway without a
    transport, which rejects sends after the submission has been validated.
    """
    try:
        transport = build_transport(config)
    except MailConfigurationError:
        if config.is_production:
            raise
        logger.exception("Could not build mail transport")
        transport = None
    return DeliveryGateway(
        transport=transport,
        from_email=format_sender(config),
        admin_email=config.admin_email,
    )


@app.on_event("startup")
async def startup_event():
    missing = settings.missing_mail_settings()
    if missing:
        if settings.is_production:
            raise RuntimeError(f"Mail delivery is not configured: missing {', '.join(missing)}")
        logger.warning("Mail delivery is not configured (missing %s); submissions will fail", ", ".join(missing))
    app.state.gateway = build_gateway(settings)
    logger.info("Leadership Team Index started (environment=%s, mail_provider=%s)", settings.environment, settings.mail_provider)


def get_settings() -> Settings:
    return settings


def get_gateway(request: Request) -> DeliveryGateway:
    gateway = getattr(request.app.state, "gateway", None)
    if gateway is None:
        gateway = build_gateway(settings)
        request.app.state.gateway = gateway
    return gateway


# =========================
# Error Handlers
# =========================


@app.exception_handler(SubmissionValidationError)
async def submission_validation_handler(request: Request, exc: SubmissionValidationError):
    logger.info("Rejected submission: %s", exc)
    return JSONResponse(status_code=400, content={"success": False, "error": str(exc)})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request to %s", request.url.path)
    return JSONResponse(status_code=400, content={"success": False, "error": INVALID_PAYLOAD_MESSAGE})


@app.exception_handler(DeliveryError)
@app.exception_handler(MailConfigurationError)
async def delivery_error_handler(request: Request, exc: Exception):
    logger.error("Report delivery failed: %s", exc)
    return JSONResponse(status_code=500, content={"success": False, "error": DELIVERY_FAILED_MESSAGE})


# =========================
# Routes
# =========================


@app.get("/", response_class=HTMLResponse)
async def survey_page(request: Request, config: Settings = Depends(get_settings)):
    return templates.TemplateResponse(
        request,
        "survey/form.html",
        {
            "brand_name": config.brand_name,
            "dimensions": DIMENSIONS,
            "closing_prompts": CLOSING_PROMPTS,
            "scores": list(SCALE),
            "scale_labels": SCALE_LABELS,
            "band_legend": BAND_LEGEND,
        },
    )


@app.get("/api/dimensions")
async def dimensions():
    return catalog_payload()


@app.post("/api/score")
async def score(payload: ScoreRequest):
    return calculate_scores(payload.ratings).to_dict()


@app.post("/send-email")
@app.post("/api/submit")
async def submit_survey(
    payload: SubmissionIn,
    gateway: DeliveryGateway = Depends(get_gateway),
    config: Settings = Depends(get_settings),
):
    submission = validate_submission(payload)
    results = calculate_scores(submission.ratings)

    reports = await run_in_threadpool(
        build_reports,
        submission.org,
        submission.email,
        results,
        ratings=submission.ratings,
        qualitative=submission.qualitative,
        brand_name=config.brand_name,
        include_pdf=config.attach_pdf_report,
    )

    await gateway.deliver(submission.org, submission.email, reports)
    logger.info("Reports delivered for %s (overall=%.2f, band=%s)", submission.org, results.overall, results.band.value)
    return {"success": True}


@app.get("/health")
async def healthcheck(config: Settings = Depends(get_settings)):
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": config.environment,
    }
