"""HTTP API for bookgraph."""
