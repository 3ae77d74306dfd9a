from .schemas import (
    Restaurant,
    Query,
    AreaConfig,
    SourceInfo,
)

__all__ = [
    "Restaurant",
    "Query",
    "AreaConfig",
    "SourceInfo",
]
