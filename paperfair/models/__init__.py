from .user import User  # noqa: F401
from .submission import Submission  # noqa: F401
from .vote import Vote  # noqa: F401

# Import ALL models so SQLAlchemy registers them

__all__ = [
    "User",
    "Submission",
    "Vote",
]
