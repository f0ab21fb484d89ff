from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]
    """APP lives as long as the process (engine, locks, hooks); UOW lives for
    one HTTP request (session, repositories, services) and commits or rolls
    back as a unit."""

    APP = new_scope("APP")
    UOW = new_scope("UOW")
