"""FastAPI application for the report decompiler.

Exposes ``ReportDecompiler.ingest`` over HTTP and, when storage is
enabled, the decompiled reports kept by ``DecompiledReportStorage``.

Usage (from project root, after installing the package):

    uvicorn report_decompiler.api.app:app --reload

Then POST a JSON body ``{"text": "...", "inputFormat": "text"}`` to
/decompile.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from ..config.config_manager import ConfigurationManager
from ..decompiler.report_decompiler import ReportDecompiler
from ..models.report import DecompiledReport
from ..parsers.serialization import ReportSerializer
from ..registry.report_type_registry import ReportTypeRegistry
from ..storage.report_storage import DecompiledReportStorage


logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def _get_enable_storage_from_env() -> bool:
    """Determine whether decompiled reports should be stored.

    Uses DECOMPILER_ENABLE_STORAGE environment variable. Accepted truthy
    values: "1", "true", "yes", "y" (case-insensitive). If not set,
    defaults to False.
    """
    value = os.getenv("DECOMPILER_ENABLE_STORAGE")
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "y"}


def _build_decompiler() -> ReportDecompiler:
    """Create a decompiler configured from ``DECOMPILER_*`` variables."""
    manager = ConfigurationManager()
    manager.load_from_env()
    return ReportDecompiler(
        config=manager.config,
        knowledge_base=manager.knowledge_base,
        registry=ReportTypeRegistry.with_builtins(),
    )


def _report_summary(report: DecompiledReport) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "id": report.id,
        "title": report.metadata.title,
        "inputFormat": report.input_format.value,
        "sourceHash": report.source_hash,
        "detectedReportType": report.detected_report_type,
        "confidenceScore": report.confidence_score,
        "sectionCount": report.structure_map.section_count,
    }
    summary["createdAt"] = report.created_at.isoformat() if report.created_at else None
    return summary


def create_app(
    decompiler: Optional[ReportDecompiler] = None,
    storage: Optional[DecompiledReportStorage] = None,
    enable_storage: Optional[bool] = None,
) -> FastAPI:
    """
    Build the HTTP application.

    Args:
        decompiler: Decompiler to serve. Built from the environment if None.
        storage: Storage for decompiled reports. When None, one is created
            only if storage is enabled.
        enable_storage: Overrides DECOMPILER_ENABLE_STORAGE.

    Returns:
        The FastAPI application.
    """
    app = FastAPI(title="Report Decompiler API", version="0.1.0")
    decompiler = decompiler or _build_decompiler()

    if enable_storage is None:
        enable_storage = _get_enable_storage_from_env()
    if storage is None and enable_storage:
        storage = DecompiledReportStorage()

    app.state.decompiler = decompiler
    app.state.storage = storage

    @app.middleware("http")
    async def add_cors_origin(request: Request, call_next):
        response = await call_next(request)
        response.headers["Access-Control-Allow-Origin"] = "*"
        return response

    @app.options("/decompile")
    async def decompile_preflight() -> Response:
        return Response(status_code=204, headers=CORS_HEADERS)

    @app.post("/decompile")
    async def decompile(request: Request) -> JSONResponse:
        """Decompile the report text in the request body."""
        try:
            body = await request.json()
            if not isinstance(body, dict):
                body = {}
            text = body.get("text")
            if not text:
                return JSONResponse(
                    status_code=400,
                    content={"error": "Missing 'text' in request body"},
                )

            report = decompiler.ingest(text, body.get("inputFormat") or "text")
            if storage is not None:
                storage.store_report(report)

            return JSONResponse(
                status_code=200,
                content={
                    "success": True,
                    "data": ReportSerializer.to_dict(report),
                    "message": "Report decompiled successfully",
                },
            )
        except Exception as exc:  # noqa: BLE001
            logger.error(f"Decompilation request failed: {exc}", exc_info=True)
            return JSONResponse(
                status_code=500,
                content={"error": "Internal error", "details": str(exc)},
            )

    @app.api_route("/decompile", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE"])
    async def decompile_wrong_method() -> JSONResponse:
        return JSONResponse(
            status_code=405,
            content={"error": "Method not allowed. Use POST."},
        )

    if storage is not None:
        _add_report_routes(app, storage)

    return app


def _add_report_routes(app: FastAPI, storage: DecompiledReportStorage) -> None:
    """Register the stored report endpoints."""

    @app.get("/reports")
    async def list_reports(limit: Optional[int] = None) -> JSONResponse:
        reports = storage.list_reports(limit=limit)
        return JSONResponse(
            status_code=200,
            content={
                "success": True,
                "data": [_report_summary(r) for r in reports],
            },
        )

    @app.get("/reports/{report_id}")
    async def get_report(report_id: str) -> JSONResponse:
        report = storage.find_report_by_id(report_id)
        if report is None:
            return JSONResponse(
                status_code=404,
                content={"error": f"Report '{report_id}' not found"},
            )
        return JSONResponse(
            status_code=200,
            content={"success": True, "data": ReportSerializer.to_dict(report)},
        )

    @app.delete("/reports/{report_id}")
    async def delete_report(report_id: str) -> JSONResponse:
        if not storage.delete_report(report_id):
            return JSONResponse(
                status_code=404,
                content={"error": f"Report '{report_id}' not found"},
            )
        return JSONResponse(
            status_code=200,
            content={"success": True, "message": f"Report '{report_id}' deleted"},
        )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
