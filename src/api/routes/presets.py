"""音色预设 API 路由"""
from typing import Optional
from fastapi import APIRouter, HTTPException, Query

from src.api.schemas import PresetInfo, PresetListResponse
from src.core.presets import list_presets

router = APIRouter(prefix="/api/v1", tags=["presets"])


@router.get("/presets", response_model=PresetListResponse)
async def get_presets(
    group: Optional[str] = Query(default=None, description="年龄分组 (child/adult/elderly)"),
):
    """获取音色预设列表"""
    try:
        presets = list_presets(group)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return PresetListResponse(code=0, presets=[PresetInfo(**p.to_dict()) for p in presets])
