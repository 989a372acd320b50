from . import auth
from . import trips
from . import invitations

__all__ = [
    "auth",
    "trips",
    "invitations",
]
