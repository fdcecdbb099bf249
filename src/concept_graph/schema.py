"""Pydantic models for the canonical concept graph."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class VisualizationKind(str, Enum):
    """Structural category of a concept graph."""
    GRAPH = "graph"
    TREE = "tree"
    FLOWCHART = "flowchart"
    HIERARCHY = "hierarchy"
    LOGICAL_FLOW = "logical-flow"
    STORYBOARD = "storyboard"


class NarrativeRole(str, Enum):
    CENTRAL = "central"
    SUPPORTING = "supporting"
    CONTEXTUAL = "contextual"
    OUTCOME = "outcome"


class LogicalRole(str, Enum):
    PREMISE = "premise"
    INFERENCE = "inference"
    CONCLUSION = "conclusion"
    EVIDENCE = "evidence"
    OBJECTION = "objection"


class StoryRole(str, Enum):
    SCENE = "scene"
    EVENT = "event"
    CONFLICT = "conflict"
    RESOLUTION = "resolution"


class Node(BaseModel):
    """A concept in the graph.

    The three role fields are independent: only the one matching the graph's
    ``kind`` carries guaranteed meaning, the others may be present or absent.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    id: str = Field(description="Identifier, unique within the graph")
    label: str = Field(description="Display label")
    details: Optional[str] = None
    weight: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    theme: Optional[str] = Field(default=None, description="Cluster or swim lane label")
    narrative_role: Optional[NarrativeRole] = Field(default=None, alias="narrativeRole")
    logical_role: Optional[LogicalRole] = Field(default=None, alias="logicalRole")
    story_role: Optional[StoryRole] = Field(default=None, alias="storyRole")


class Edge(BaseModel):
    """A directed relation between two nodes."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    source: str
    target: str
    label: Optional[str] = None
    type: Optional[str] = Field(default=None, description="Relation category; vocabulary depends on kind")
    strength: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class GraphMetadata(BaseModel):
    """Human-readable summaries derived from nodes and edges.

    Carried as given: model replies are not checked beyond being an object.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    concepts: Any = Field(default_factory=list)
    relationships: Any = Field(default_factory=list)


class RenderOptions(BaseModel):
    """Layout hints passed through to the renderer untouched."""
    model_config = ConfigDict(frozen=True, extra="allow")

    orientation: Any = None


class VisualizationGraph(BaseModel):
    """Canonical output of every extraction strategy."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, use_enum_values=True)

    kind: VisualizationKind
    title: str
    description: str
    nodes: list[Node] = Field(default_factory=list)
    edges: list[Edge] = Field(default_factory=list)
    metadata: GraphMetadata = Field(default_factory=GraphMetadata)
    render_options: Optional[RenderOptions] = Field(default=None, alias="renderOptions")

    @field_validator("nodes")
    @classmethod
    def node_ids_unique(cls, nodes: list[Node]) -> list[Node]:
        seen: set[str] = set()
        for node in nodes:
            if node.id in seen:
                raise ValueError(f"duplicate node id: {node.id}")
            seen.add(node.id)
        return nodes

    def node_ids(self) -> set[str]:
        return {node.id for node in self.nodes}

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire field names, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)


def empty_graph(title: str, description: str = "No content to analyze") -> VisualizationGraph:
    """Placeholder graph returned for empty or whitespace-only input."""
    return VisualizationGraph(
        kind=VisualizationKind.GRAPH,
        title=title,
        description=description,
        nodes=[],
        edges=[],
        metadata=GraphMetadata(concepts=[], relationships=[]),
    )


def summarize_relationships(nodes: list[Node], edges: list[Edge]) -> list[str]:
    """Render each edge as ``"<source label> <edge label> <target label>"``."""
    labels = {node.id: node.label for node in nodes}
    summaries = []
    for edge in edges:
        source = labels.get(edge.source, edge.source)
        target = labels.get(edge.target, edge.target)
        summaries.append(f"{source} {edge.label} {target}")
    return summaries


__all__ = [
    "VisualizationKind",
    "NarrativeRole",
    "LogicalRole",
    "StoryRole",
    "Node",
    "Edge",
    "GraphMetadata",
    "RenderOptions",
    "VisualizationGraph",
    "empty_graph",
    "summarize_relationships",
]
