from hostel_occupancy.services.occupancy.consistency_coordinator import ConsistencyCoordinator

__all__ = ["ConsistencyCoordinator"]
