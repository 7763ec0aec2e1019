from .connect import get_db_dir, get_db_path, get_session, make_session_factory, sqlite_uri
from .store import load_group_graph, load_registry, save_group_graph, save_registry

__all__ = [
    "get_db_dir",
    "get_db_path",
    "get_session",
    "load_group_graph",
    "load_registry",
    "make_session_factory",
    "save_group_graph",
    "save_registry",
    "sqlite_uri",
]
