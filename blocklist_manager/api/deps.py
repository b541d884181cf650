# blocklist_manager/api/deps.py
from fastapi import Request

from blocklist_manager.core.zoraxy_client import ZoraxyClient
from blocklist_manager.services.importer import ImportService


def get_zoraxy_client(request: Request) -> ZoraxyClient:
    return request.app.state.zoraxy_client


def get_import_service(request: Request) -> ImportService:
    return request.app.state.import_service
