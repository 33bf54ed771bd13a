import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
import uvicorn
from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from api_checker.config.config import Config, PipelineConfig, load_pipeline_config
from api_checker.config.logging_config import setup_logging
from api_checker.core.beacon_client import BeaconClient
from api_checker.core.endpoint_health import EndpointHealthTracker
from api_checker.core.metrics_sink import MetricsSink, get_default_sink
from api_checker.core.parameter_sampler import ChainClock, ParameterSampler
from api_checker.core.pipeline import Pipeline
from api_checker.core.probe_factory import ProbeFactory
from api_checker.core.scheduler import Scheduler

setup_logging()
logger = logging.getLogger(__name__)


def build_pipeline(
    pipeline_config: PipelineConfig,
    http_client: httpx.AsyncClient,
    metrics: MetricsSink,
) -> Pipeline:
    health = EndpointHealthTracker(
        failure_threshold=pipeline_config.endpoint_failure_threshold,
        cooldown_runs=pipeline_config.endpoint_cooldown_runs,
    )
    clients = [
        BeaconClient(url, http_client, timeout=pipeline_config.request_timeout_seconds)
        for url in pipeline_config.endpoints
    ]
    probes = ProbeFactory.create_pipeline_probes(
        pipeline_config.probes,
        metrics,
        timeout=pipeline_config.request_timeout_seconds,
        health=health if health.enabled else None,
    )
    sampler = ParameterSampler(
        ChainClock(pipeline_config.genesis_time, pipeline_config.seconds_per_slot),
        recent_slot_window=pipeline_config.recent_slot_window,
    )
    return Pipeline(
        probes, clients, sampler, health=health if health.enabled else None
    )


def create_app(
    config=Config,
    metrics: Optional[MetricsSink] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the FastAPI app serving /metrics and /healthz. The lifespan loads the
    configuration, so a ConfigError aborts startup before any probe runs.
    """
    metrics = metrics or get_default_sink()

    @asynccontextmanager
    async def lifespan(app):
        pipeline_config = load_pipeline_config(config)
        logger.info(
            f"Starting API checker against {len(pipeline_config.endpoints)} endpoints: "
            f"{list(pipeline_config.endpoints)}"
        )
        http_client = httpx.AsyncClient(transport=transport)
        pipeline = build_pipeline(pipeline_config, http_client, metrics)
        scheduler = Scheduler(
            pipeline, pipeline_config.run_every_seconds, metrics=metrics
        )
        app.state.pipeline = pipeline
        app.state.scheduler = scheduler
        await scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            await http_client.aclose()

    app = FastAPI(lifespan=lifespan)

    @app.get("/metrics")
    def prometheus_metrics():
        return Response(generate_latest(metrics.registry), media_type=CONTENT_TYPE_LATEST)

    @app.get("/healthz")
    def healthz():
        pipeline = getattr(app.state, "pipeline", None)
        return {
            "status": "ok",
            "pipeline_state": pipeline.state.value if pipeline else "idle",
            "endpoints": len(pipeline.clients) if pipeline else 0,
            "runs_completed": pipeline.runs_completed if pipeline else 0,
        }

    return app


app = create_app()


def main():
    uvicorn.run(app, host=Config.METRICS_HOST, port=Config.METRICS_PORT)


if __name__ == "__main__":
    main()
