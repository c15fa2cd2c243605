from sqlalchemy.exc import OperationalError


class BrokenRepository:
    """Repository whose every call fails like an unreachable database."""

    def __getattr__(self, name):
        async def fail(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("database is unavailable"))

        return fail
