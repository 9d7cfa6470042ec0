"""역 디렉토리 라우터 — 정적 역 목록."""

from fastapi import APIRouter

from stationsync.constants import STATIONS
from stationsync.schemas.views import StationEntry

router: APIRouter = APIRouter()


@router.get("", response_model=list[StationEntry])
async def list_stations() -> list[dict]:
    return [{"code": code, "name": name} for code, name in STATIONS]
