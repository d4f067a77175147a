from .auth import router as auth
from .documents import router as documents
from .links import router as links
from .memos import router as memos
from .ui import router as ui
