"""
Services module for bookgraph.

This module provides business logic services:
- graph: Book and category graph construction with cached scoring

Usage:
    from bookgraph.services import GraphService, get_graph_service
"""

from .graph import GraphService, get_graph_service, set_graph_service

__all__ = [
    "GraphService",
    "get_graph_service",
    "set_graph_service",
]
