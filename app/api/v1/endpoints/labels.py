"""Labels API: display names, message localization, enrichment, grouping."""

from fastapi import APIRouter

from app.api.v1.dependencies import AccessSessionDep, SignedInSessionDep
from app.schemas.labels import (
    EnrichResponse,
    LabelResponse,
    LocalizeRequest,
    LocalizeResponse,
    PermissionGroup,
    PermissionItem,
)

router = APIRouter()


@router.get("/groups", response_model=list[PermissionGroup])
def list_groups(session: AccessSessionDep):
    """Catalog permissions grouped by module (empty until enrichment succeeded)."""
    return [
        PermissionGroup(
            module=module,
            permissions=[
                PermissionItem(
                    code=p.code,
                    label=session.display_name(p.code),
                    description=p.description,
                )
                for p in permissions
            ],
        )
        for module, permissions in session.grouped_permissions().items()
    ]


@router.post("/enrich", response_model=EnrichResponse)
async def enrich(session: SignedInSessionDep):
    """Load the permission and translation catalogs (errors degrade silently)."""
    enriched = await session.enrich()
    return EnrichResponse(enriched=enriched, labels_loaded=session.catalog.labels_loaded)


@router.post("/localize", response_model=LocalizeResponse)
def localize(body: LocalizeRequest, session: AccessSessionDep):
    """Replace permission codes in a backend message with their labels."""
    return LocalizeResponse(text=session.localize(body.text))


@router.get("/{code}", response_model=LabelResponse)
def get_label(code: str, session: AccessSessionDep):
    """Display name for a permission code; never the raw code for MODULE_ACTION codes."""
    return LabelResponse(code=code, label=session.display_name(code))
