from __future__ import annotations

"""Prompt composition for the model-backed extractor."""

from dataclasses import dataclass, field
from pathlib import Path

from ..schema import VisualizationKind

TEMPLATE_DIR = Path(__file__).parent / "templates"

LOGICAL_FLOW_EDGE_TYPES = ("supports", "contradicts", "derives", "qualifies")
STORYBOARD_EDGE_TYPES = ("leads_to", "branches_to", "converges", "influences")

USER_PROMPT_PREFIX = "Analyze the following text and create a concept visualization:\n\n"


def _quote_all(values: tuple[str, ...]) -> str:
    return " | ".join(f'"{value}"' for value in values)


@dataclass(frozen=True)
class PromptBuilder:
    """Render system prompts from the packaged instruction templates.

    The builder is a pure function of the requested variant: the three
    templates (default, logical-flow, storyboard) are read once from disk and
    every call returns the same text for the same variant.
    """

    template_dir: Path = TEMPLATE_DIR
    _templates: dict[str, str] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        schema = (self.template_dir / "schema.txt").read_text(encoding="utf-8").strip()
        for name in ("default", "logical_flow", "storyboard"):
            template = (self.template_dir / f"{name}.txt").read_text(encoding="utf-8")
            self._templates[name] = template.replace("{{schema}}", schema)

    def build_system_prompt(self, variant: VisualizationKind | str | None = None) -> str:
        kind = VisualizationKind(variant) if variant else None

        if kind is VisualizationKind.LOGICAL_FLOW:
            prompt = self._templates["logical_flow"]
            prompt = prompt.replace("{{edge_types}}", _quote_all(LOGICAL_FLOW_EDGE_TYPES))
        elif kind is VisualizationKind.STORYBOARD:
            prompt = self._templates["storyboard"]
            prompt = prompt.replace("{{edge_types}}", _quote_all(STORYBOARD_EDGE_TYPES))
        else:
            hint = f'\nUse the "{kind.value}" kind for this response.\n' if kind else ""
            prompt = self._templates["default"].replace("{{kind_hint}}", hint)
        return prompt.strip()

    @staticmethod
    def build_user_prompt(text: str) -> str:
        return f"{USER_PROMPT_PREFIX}{text}"


_DEFAULT_BUILDER: PromptBuilder | None = None


def _default_builder() -> PromptBuilder:
    global _DEFAULT_BUILDER
    if _DEFAULT_BUILDER is None:
        _DEFAULT_BUILDER = PromptBuilder()
    return _DEFAULT_BUILDER


def build_system_prompt(variant: VisualizationKind | str | None = None) -> str:
    """Instruction text for the requested graph variant."""
    return _default_builder().build_system_prompt(variant)


def build_user_prompt(text: str) -> str:
    return PromptBuilder.build_user_prompt(text)


__all__ = [
    "PromptBuilder",
    "LOGICAL_FLOW_EDGE_TYPES",
    "STORYBOARD_EDGE_TYPES",
    "build_system_prompt",
    "build_user_prompt",
]
