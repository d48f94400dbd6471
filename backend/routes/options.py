"""Option lists for admin forms and public filters."""
from fastapi import APIRouter

from models.enums import option_values
from utils.errors import NotFoundError

router = APIRouter(prefix="/api/options", tags=["options"])


@router.get("")
async def get_options():
    return {"success": True, "data": option_values()}


@router.get("/{resource}")
async def get_resource_options(resource: str):
    options = option_values()
    if resource not in options:
        raise NotFoundError(f"No options for {resource}")
    return {"success": True, "data": options[resource]}
