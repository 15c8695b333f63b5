"""ORM Models — SQLAlchemy declarative models.

Design Decisions:
    - Models imported here so Base.metadata is complete before create_all / autogenerate
"""

from ntrl_stats.models.kv_entry import KeyValueEntry  # noqa: F401
