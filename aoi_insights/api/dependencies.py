"""
Dependency injection for FastAPI.
"""
from typing import Annotated
from fastapi import Depends

from aoi_insights.services.application.map_workspace import (
    MapWorkspace,
    get_workspace,
)


# Type aliases for cleaner route signatures
WorkspaceDep = Annotated[MapWorkspace, Depends(get_workspace)]
