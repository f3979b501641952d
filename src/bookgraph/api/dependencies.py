"""Dependency injection for API endpoints."""

from typing import Annotated

from fastapi import Depends

from ..services.graph import GraphService, get_graph_service

# Usage: service: GraphServiceDependency
GraphServiceDependency = Annotated[GraphService, Depends(get_graph_service)]
