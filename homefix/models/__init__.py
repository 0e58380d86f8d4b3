from .auth import Role, Token, ProfileOut
from .service_request import (
    ServiceType,
    PreferredTime,
    RequestStatus,
    Location,
    ServiceRequestCreate,
    ServiceRequestOut,
    ServiceRequestCreated,
    StatusUpdate,
    AdminNotesUpdate,
    AssignmentIn
)
from .technician import (
    TechnicianStatus,
    GeoPoint,
    TechnicianCreate,
    TechnicianOut,
    TechnicianCandidate,
    Assignment,
    AvailabilityUpdate
)
from .review import SatisfactionLevel, ReviewCreate, ReviewOut, TechnicianReviews
from .parts import PartOut
from .realtime import ChangeType, ChangeEvent

__all__ = [
    'Role', 'Token', 'ProfileOut',
    'ServiceType', 'PreferredTime', 'RequestStatus', 'Location',
    'ServiceRequestCreate', 'ServiceRequestOut', 'ServiceRequestCreated',
    'StatusUpdate', 'AdminNotesUpdate', 'AssignmentIn',
    'TechnicianStatus', 'GeoPoint', 'TechnicianCreate', 'TechnicianOut',
    'TechnicianCandidate', 'Assignment', 'AvailabilityUpdate',
    'SatisfactionLevel', 'ReviewCreate', 'ReviewOut', 'TechnicianReviews',
    'PartOut',
    'ChangeType', 'ChangeEvent'
]
