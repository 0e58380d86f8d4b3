from .service_request_queries import (
    create_service_request,
    get_service_request,
    list_service_requests,
    update_service_request
)
from .technician_queries import (
    create_technician,
    get_technician_by_id,
    get_technician_by_profile,
    list_technicians,
    find_available_technicians,
    update_technician_status
)
from .review_queries import (
    create_review,
    get_request_reviews,
    get_technician_reviews
)
from .parts_queries import list_parts, get_part
from .profile_queries import (
    create_profile,
    get_profile_by_id,
    get_credentials,
    list_profiles
)

__all__ = [
    # Service request queries
    'create_service_request',
    'get_service_request',
    'list_service_requests',
    'update_service_request',

    # Technician queries
    'create_technician',
    'get_technician_by_id',
    'get_technician_by_profile',
    'list_technicians',
    'find_available_technicians',
    'update_technician_status',

    # Review queries
    'create_review',
    'get_request_reviews',
    'get_technician_reviews',

    # Parts catalog
    'list_parts',
    'get_part',

    # Profile queries
    'create_profile',
    'get_profile_by_id',
    'get_credentials',
    'list_profiles'
]
