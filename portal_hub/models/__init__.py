from .document import Document
from .link import Link
from .memo import Memo
from .user import User

__all__ = ["Document", "Link", "Memo", "User"]
