import logging
from typing import Any

from fastapi import Body, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from irrf_api.config import get_settings
from irrf_api.lifespan import build_application_lifespan
from ..core.brackets import IRRF_TABLE_052025, describe_table
from ..core.calc import compute_irrf
from ..core.validate import IrrfValidationError, validate_irrf_payload

TABLE_LABEL = "05/2025"
logger = logging.getLogger("irrf_app")


async def _announce_table(_: FastAPI) -> None:
    settings = get_settings()
    logger.info(
        "IRRF API ready; table=%s build=%s sha=%s",
        TABLE_LABEL,
        settings.build_version,
        settings.build_sha,
    )


app = FastAPI(
    title="API IRRF",
    description=(
        "Cálculo do IRRF mensal (tabela vigente a partir de 05/2025) com a redução "
        "transitória da PL 1087/25."
    ),
    version="1.0.0",
    lifespan=build_application_lifespan("api", startup_hook=_announce_table),
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(get_settings().cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(IrrfValidationError)
async def _irrf_validation_handler(_: Request, exc: IrrfValidationError) -> JSONResponse:
    logger.warning(
        "IRRF request rejected: code=%s fields=%s",
        exc.code,
        ",".join(issue.field or "-" for issue in exc.issues),
    )
    return JSONResponse(status_code=400, content=exc.as_dict())


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning("Malformed IRRF request: %s error(s)", len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={
            "erro": "Requisição inválida: envie um objeto JSON com os campos numéricos.",
            "issues": jsonable_encoder(exc.errors()),
        },
    )


@app.get("/health")
def health():
    settings = getattr(app.state, "settings", get_settings())
    return {
        "status": "ok",
        "table": TABLE_LABEL,
        "build": {
            "version": settings.build_version,
            "sha": settings.build_sha,
            "include_trace": settings.include_trace,
        },
    }


@app.post("/calcular-irrf")
def calcular_irrf(payload: Any = Body(default=None), memoria: bool | None = None):
    settings = getattr(app.state, "settings", get_settings())
    include_trace = settings.include_trace if memoria is None else memoria
    in_ = validate_irrf_payload(payload)
    result = compute_irrf(in_, include_trace=include_trace)
    logger.info(
        "IRRF computed: simplified=%s rate=%s tax=%s reduction=%s",
        result.simplified_minimum_used,
        result.rate,
        result.tax,
        result.reduction,
    )
    return result.to_payload()


@app.get("/tabela-irrf")
def tabela_irrf():
    table = getattr(app.state, "bracket_table", IRRF_TABLE_052025)
    return {"vigencia": TABLE_LABEL, "faixas": describe_table(table)}
