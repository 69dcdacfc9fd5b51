# shield_sleep/api/routes/sleep_routes.py
import asyncio
import logging
from functools import lru_cache
from typing import Any, Dict

from fastapi import APIRouter, Body, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from shield_sleep.config.config_manager import ConfigManager
from shield_sleep.core.scoring.shield_score import ShieldScoreCalculator
from shield_sleep.core.services.sleep_service import SleepService

logger = logging.getLogger(__name__)


# Dependencies
@lru_cache()
def get_config():
    return ConfigManager()


def get_sleep_service(config: ConfigManager = Depends(get_config)):
    calculator = ShieldScoreCalculator(
        randomize_borderline_delta=bool(config.get('scoring.randomize_borderline_delta', False)),
        seed=config.get('scoring.seed'),
    )
    return SleepService(calculator)


router = APIRouter(
    prefix="/api/sleep",
    tags=["Sleep"],
    responses={404: {"description": "Not found"}}
)


@router.post("/score", response_model=Dict)
async def calculate_sleep_score(
    payload: Any = Body(...),
    service: SleepService = Depends(get_sleep_service)
):
    """Calculate the shield sleep score and biological age delta"""
    status_code, result = service.score_payload(payload)
    return JSONResponse(status_code=status_code, content=result.to_response())


@router.post("/lab/upload", response_model=Dict)
async def upload_lab_report(
    file: UploadFile = File(...),
    config: ConfigManager = Depends(get_config)
):
    """
    Simulated lab report upload.
    The file is acknowledged and discarded; nothing is stored or parsed.
    """
    logger.info(f"Received simulated lab report upload request for file: {file.filename}")

    first_byte = await file.read(1)
    if not file.filename or not first_byte:
        return JSONResponse(status_code=400, content={"message": "No file selected for upload."})

    delay = float(config.get('upload.simulated_delay_seconds', 0) or 0)
    if delay > 0:
        await asyncio.sleep(delay)

    logger.info(f"Simulated processing of lab report: {file.filename}")
    return {"message": f"Lab report '{file.filename}' received for simulated processing."}
