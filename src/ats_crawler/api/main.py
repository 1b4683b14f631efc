import uvicorn
from fastapi import FastAPI, status

from ats_crawler.config import settings
from ats_crawler.pipeline import trigger_pipeline
from ats_crawler.schema import PipelineConfig

app = FastAPI(title="ats-crawler")


# ── Pipeline ─────────────────────────────────────────────────────────────────

@app.post("/api/pipeline/run", status_code=status.HTTP_202_ACCEPTED)
async def start_pipeline(body: PipelineConfig | None = None):
    """Start a run in the background. The response does not wait for it."""
    trigger_pipeline(body or PipelineConfig())
    return {"status": "accepted"}


@app.get("/health")
async def health():
    return {"status": "ok"}


def serve():
    uvicorn.run("ats_crawler.api.main:app", host=settings.api_host, port=settings.api_port)
