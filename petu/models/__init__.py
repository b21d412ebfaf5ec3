# Import models so that they register with Base.metadata
from petu.models.events import Event
from petu.models.join_requests import JoinRequest, JoinRequestStatus
from petu.models.users import User

__all__ = ["Event", "JoinRequest", "JoinRequestStatus", "User"]
