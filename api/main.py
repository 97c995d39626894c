"""FastAPI application exposing the prediction client over HTTP."""

import logging
import os
from contextlib import asynccontextmanager
from typing import Literal

from fastapi import Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import ErrorResponse, HealthResponse
from cardio_risk import __version__
from cardio_risk.client.api import ApiClient, build_client
from cardio_risk.errors import NetworkError, NotFoundError, ServiceError
from cardio_risk.schemas import (
    HistoryFilters,
    MLMetrics,
    PaginatedResponse,
    PredictionInput,
    PredictionResult,
)
from cardio_risk.utils.config import load_client_settings

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV_VAR = "CARDIO_RISK_CONFIG_DIR"


def get_client(request: Request) -> ApiClient:
    return request.app.state.client


def _error(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, code=code).model_dump(),
    )


def create_app(client: ApiClient | None = None) -> FastAPI:
    """Build the application around ``client``, or one built from config on startup."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(
            level=logging.INFO,
            format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
        )
        if client is None:
            settings = load_client_settings(os.environ.get(CONFIG_DIR_ENV_VAR, "configs"))
            app.state.client = build_client(settings)
            logger.info("Client configured for %s", settings.base_url)
        else:
            app.state.client = client
        yield
        if client is None:
            app.state.client.close()

    app = FastAPI(
        title="Cardiovascular Risk Prediction API",
        description=(
            "Adapts assessment forms to the cardiovascular classifier service, "
            "explains its answers and keeps a browsable prediction history."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return _error(404, str(exc), exc.code)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        return _error(502, exc.message, exc.code)

    @app.exception_handler(NetworkError)
    async def network_error_handler(request: Request, exc: NetworkError):
        return _error(502, str(exc), "NETWORK_ERROR")

    @app.get("/health", response_model=HealthResponse)
    def health_check(client: ApiClient = Depends(get_client)):
        """Health check endpoint."""
        return HealthResponse(
            base_url=client.gateway.base_url,
            history_size=len(client.history),
            version=__version__,
        )

    @app.post("/predictions", response_model=PredictionResult, status_code=201)
    def create_prediction(data: PredictionInput, client: ApiClient = Depends(get_client)):
        """Classify an assessment and record it in the history."""
        return client.create_prediction(data)

    @app.get("/predictions", response_model=PaginatedResponse[PredictionResult])
    def list_predictions(
        risk_level: Literal["low", "medium", "high", "all"] | None = Query(None, alias="riskLevel"),
        page: int = Query(1, ge=1),
        limit: int | None = Query(None, ge=1),
        client: ApiClient = Depends(get_client),
    ):
        filters = HistoryFilters(
            risk_level=risk_level,
            page=page,
            limit=limit,
        )
        return client.get_prediction_history(filters)

    @app.get("/predictions/{prediction_id}", response_model=PredictionResult)
    def get_prediction(prediction_id: str, client: ApiClient = Depends(get_client)):
        return client.get_prediction(prediction_id)

    @app.delete("/predictions/{prediction_id}", status_code=204)
    def delete_prediction(prediction_id: str, client: ApiClient = Depends(get_client)):
        client.delete_prediction(prediction_id)
        return Response(status_code=204)

    @app.get("/export")
    def export_history(
        format: Literal["csv", "json"] = Query("csv"),
        client: ApiClient = Depends(get_client),
    ):
        payload = client.export_history(format)
        return Response(
            content=payload.content,
            media_type=payload.media_type,
            headers={"Content-Disposition": f'attachment; filename="{payload.filename}"'},
        )

    @app.get("/metrics", response_model=MLMetrics)
    def get_metrics(client: ApiClient = Depends(get_client)):
        return client.get_metrics()

    return app


app = create_app()
