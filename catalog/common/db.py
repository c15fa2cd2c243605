from sqlalchemy import String
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.sql.functions import GenericFunction


class Base(DeclarativeBase):
    pass


class casefold(GenericFunction):
    """Unicode case folding, for case-insensitive comparisons.

    SQLite's own ``lower()`` only folds ASCII letters, so on SQLite this
    calls a Python function registered on every connection (see
    ``database.register_sqlite_functions``). Other backends use ``lower()``.
    """

    type = String()
    name = "casefold"
    inherit_cache = True


@compiles(casefold)
def _casefold_default(element, compiler, **kw):
    return "lower(%s)" % compiler.process(element.clauses, **kw)


@compiles(casefold, "sqlite")
def _casefold_sqlite(element, compiler, **kw):
    return "casefold(%s)" % compiler.process(element.clauses, **kw)
