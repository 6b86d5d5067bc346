from hostel_occupancy.services.roster.roster_service import (
    RosterService,
    registry_record,
    structure_of,
)

__all__ = ["RosterService", "registry_record", "structure_of"]
