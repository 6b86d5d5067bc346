"""
Hostel endpoints: structure management, rosters and room placement.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from hostel_occupancy.api.v1.deps import get_hostel_service, get_roster_service
from hostel_occupancy.api.v1.responses import service_response
from hostel_occupancy.schemas.hostel import HostelCreate, HostelUpdate
from hostel_occupancy.services import HostelService, RosterService

router = APIRouter(prefix="/hostels", tags=["Hostels"])


@router.get("")
def list_hostels(
    request: Request,
    service: HostelService = Depends(get_hostel_service),
) -> JSONResponse:
    return service_response(service.list_hostels(), request)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_hostel(
    payload: HostelCreate,
    request: Request,
    service: HostelService = Depends(get_hostel_service),
) -> JSONResponse:
    return service_response(service.create_hostel(payload), request, status.HTTP_201_CREATED)


@router.get("/{identifier}")
def get_hostel(
    identifier: str,
    request: Request,
    service: HostelService = Depends(get_hostel_service),
) -> JSONResponse:
    return service_response(service.get_hostel(identifier), request)


@router.put("/{hostel_id}")
def update_hostel(
    hostel_id: str,
    payload: HostelUpdate,
    request: Request,
    service: HostelService = Depends(get_hostel_service),
) -> JSONResponse:
    return service_response(service.update_hostel(hostel_id, payload), request)


@router.delete("/{hostel_id}")
def delete_hostel(
    hostel_id: str,
    request: Request,
    username: Optional[str] = Query(default=None),
    service: HostelService = Depends(get_hostel_service),
) -> JSONResponse:
    return service_response(service.delete_hostel(hostel_id, username=username), request)


@router.get("/{identifier}/rooms")
def hostel_rooms(
    identifier: str,
    request: Request,
    service: RosterService = Depends(get_roster_service),
) -> JSONResponse:
    """Canonical room roster with occupants and placeholder slots."""
    return service_response(service.build_roster(identifier), request)


@router.get("/{identifier}/auto-assign")
def auto_assign(
    identifier: str,
    request: Request,
    service: RosterService = Depends(get_roster_service),
) -> JSONResponse:
    return service_response(service.auto_assign(identifier), request)


@router.get("/{identifier}/rooms/{room}/capacity")
def room_capacity(
    identifier: str,
    room: str,
    request: Request,
    service: RosterService = Depends(get_roster_service),
) -> JSONResponse:
    return service_response(service.room_has_capacity(identifier, room), request)


@router.post("/{identifier}/legacy-records")
async def import_legacy_records(
    identifier: str,
    request: Request,
    replace: bool = Query(default=True),
    username: Optional[str] = Query(default=None),
    service: HostelService = Depends(get_hostel_service),
) -> JSONResponse:
    """Import an old room list sent as a CSV request body."""
    content = (await request.body()).decode("utf-8-sig")
    result = service.import_legacy_records(identifier, content, username=username, replace=replace)
    return service_response(result, request)
