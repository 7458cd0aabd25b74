"""Prometheus scrape endpoint for the verification workflow counters."""

from fastapi import APIRouter, Response

from reunite.bootstrap.metrics import get_metrics_exporter

router = APIRouter(prefix="/v1", tags=["metrics"])


@router.get(
    "/metrics",
    summary="Workflow counters in Prometheus exposition format",
    response_class=Response,
    responses={200: {"content": {"text/plain": {}}}},
)
async def get_metrics() -> Response:
    exporter = get_metrics_exporter()
    return Response(
        content=exporter.generate_metrics(),
        media_type=exporter.content_type,
        headers={"Cache-Control": "no-store"},
    )
