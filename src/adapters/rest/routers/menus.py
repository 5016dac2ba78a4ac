"""Direct menu synthesis and role lookup, no LLM involved."""

from fastapi import APIRouter, Depends

from adapters.rest.dependencies import caller_profile, get_factory
from adapters.rest.schemas import MenuBody, RoleOut
from application.services.role_resolver import permissions_for_role, resolve_profile
from domain.models import UserRole
from factory import ServiceFactory

router = APIRouter(tags=["menus"])


@router.post("/menus")
async def synthesize_menu(
    body: MenuBody,
    factory: ServiceFactory = Depends(get_factory),
) -> dict:
    profile = resolve_profile(body.user_query, caller_profile(body.role))
    tree = factory.create_menu_engine().synthesize(body.user_query, profile)
    return tree.to_dict()


@router.get("/roles/{role}", response_model=RoleOut)
async def get_role(role: UserRole):
    return RoleOut(
        role=role,
        permissions=permissions_for_role(role).to_dict(include_unset=True),
    )
