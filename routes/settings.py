"""Player settings the core reads (currently just the haptics toggle)."""
from fastapi import APIRouter, Depends

from models import SettingsRequest
from services import HAPTICS_KEY, SessionRegistry, get_registry

router = APIRouter()


@router.get("")
async def get_settings(registry: SessionRegistry = Depends(get_registry)):
    return {"hapticsEnabled": registry.store.get_flag(HAPTICS_KEY, True)}


@router.put("")
async def update_settings(req: SettingsRequest, registry: SessionRegistry = Depends(get_registry)):
    registry.store.set_flag(HAPTICS_KEY, req.haptics_enabled)
    return {"hapticsEnabled": req.haptics_enabled}
