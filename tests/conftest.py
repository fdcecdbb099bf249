"""Shared fixtures."""

import pytest


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def valid_graph_dict():
    """Minimal well-formed model response payload"""
    return {
        "kind": "graph",
        "title": "Water cycle",
        "description": "How water moves through the environment",
        "nodes": [
            {"id": "a", "label": "Evaporation", "weight": 0.9, "narrativeRole": "central"},
            {"id": "b", "label": "Condensation", "theme": "atmosphere"},
        ],
        "edges": [
            {"source": "a", "target": "b", "label": "precedes", "type": "relates", "strength": 0.8},
        ],
        "metadata": {
            "concepts": ["Evaporation", "Condensation"],
            "relationships": ["Evaporation precedes Condensation"],
        },
    }
