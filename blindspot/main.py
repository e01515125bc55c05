import logging
from datetime import date

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from blindspot import analyzer, credentials, llm
from blindspot.config import settings
from blindspot.errors import BlindspotError, InvalidRequest, SchemaViolation, Timeout
from blindspot.layout import CanvasConfig
from blindspot.models import AnalyzeRequest, AnalyzeResponse, Assumption, ErrorResponse, ExportRequest
from blindspot.pdf import build_pdf, pdf_filename
from blindspot.render import render_matrix_svg
from blindspot.report import format_digest, format_experiment_plan

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger(__name__)

app = FastAPI(title="blindspot-spotter", version="0.1.0")


def _error(status: int, error: str, details: str = "") -> JSONResponse:
    return JSONResponse(status_code=status, content=ErrorResponse(error=error, details=details).model_dump())


@app.exception_handler(BlindspotError)
async def blindspot_error_handler(request: Request, exc: BlindspotError):
    if isinstance(exc, InvalidRequest):
        return _error(400, exc.details)
    if isinstance(exc, SchemaViolation):
        log.warning("Schema violation: %s", "; ".join(exc.problems))
    else:
        log.warning("%s: %s", exc.kind, exc.details)
    status = 504 if isinstance(exc, Timeout) else 500
    return _error(status, exc.user_message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}" for err in exc.errors()
    )
    return _error(400, "Invalid request", problems)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.get("/api/health")
async def health():
    return {"status": "ok", "model": settings.llm.model}


@app.post("/api/analyze", response_model=AnalyzeResponse)
async def analyze(req: AnalyzeRequest):
    return await analyzer.analyze(req)


def _generated(req: ExportRequest) -> date:
    return req.generated or date.today()


@app.post("/api/export/text", response_class=PlainTextResponse)
async def export_text(req: ExportRequest):
    return format_digest(req.result, req.user_input, _generated(req))


@app.post("/api/export/experiment", response_class=PlainTextResponse)
async def export_experiment(item: Assumption):
    return format_experiment_plan(item)


@app.post("/api/export/pdf")
async def export_pdf(req: ExportRequest):
    generated = _generated(req)
    data = build_pdf(req.result, req.user_input, generated)
    return Response(
        content=data,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(generated)}"'},
    )


@app.post("/api/export/matrix.svg")
async def export_matrix(req: ExportRequest):
    svg = render_matrix_svg(req.result.assumptions, CanvasConfig.from_settings(), state=req.state)
    return Response(content=svg, media_type="image/svg+xml")


@app.get("/api/settings")
async def get_settings():
    return {
        "model": settings.llm.model,
        "has_api_key": bool(credentials.get_api_key()),
    }


class SetApiKeyRequest(BaseModel):
    api_key: str


@app.put("/api/settings/api-key")
async def set_api_key(req: SetApiKeyRequest):
    credentials.save_api_key(req.api_key.strip())
    llm.reset_client()
    return {"has_api_key": bool(credentials.get_api_key())}
