from .engine import create_db_and_tables, get_engine
from .repositories import DatabaseError
from .unit_of_work import SqlModelUnitOfWork, SqlModelUnitOfWorkFactory

__all__ = [
    "DatabaseError",
    "SqlModelUnitOfWork",
    "SqlModelUnitOfWorkFactory",
    "create_db_and_tables",
    "get_engine",
]
