from typing import Annotated, List

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import PlainTextResponse

from blocklist_manager.api.deps import get_import_service, get_zoraxy_client
from blocklist_manager.core.zoraxy_client import ZoraxyClient
from blocklist_manager.schemas.blocklist import ImportRequest
from blocklist_manager.schemas.zoraxy import AccessRule
from blocklist_manager.services.importer import ImportService

router = APIRouter(prefix="", tags=["blocklist"])


# --------- POST /api/import (access_rule_id + comma separated blocklist) ----------
@router.post("/import", response_class=PlainTextResponse, status_code=status.HTTP_202_ACCEPTED)
async def start_import(
    form: Annotated[ImportRequest, Query()],
    service: ImportService = Depends(get_import_service),
):
    return service.start_import(form.access_rule_id, form.blocklist)


@router.get("/list-access-rules", response_model=List[AccessRule])
async def list_access_rules(client: ZoraxyClient = Depends(get_zoraxy_client)):
    return await client.list_access_rules()


@router.get("/list-blocklisted-ips", response_model=List[str])
async def list_blocklisted_ips(
    rule_id: str = Query(..., min_length=1),
    client: ZoraxyClient = Depends(get_zoraxy_client),
):
    return await client.list_blacklisted_ips(rule_id)
