"""Flow graph and configuration models."""

from typing import Any

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
    model_validator,
)

from flowpath.config.settings import Settings

# DSL Version constants
SUPPORTED_VERSIONS = frozenset({"1.0"})
CURRENT_VERSION = "1.0"

# Keys of the legacy object-shaped component layout, in display order
_LEGACY_COMPONENT_SLOTS = ("textInstruction", "displayUpload", "question")


class PageComponent(BaseModel):
    """A UI component on a node page (question, video, text, ...)."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(default="", description="Component identifier")
    type: str = Field(description="Component type, e.g. 'multiple-choice'")
    config: dict[str, Any] = Field(default_factory=dict, description="Type-specific settings")
    order: int | None = Field(default=None, description="Display position on the page")

    @field_validator("config", mode="before")
    @classmethod
    def _none_config(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def options(self) -> list[str]:
        """Answer options for choice questions (empty for other types)."""
        options = self.config.get("options") or []
        if not isinstance(options, list):
            return []
        return [str(o) for o in options]


class Node(BaseModel):
    """A displayable page of the flow.

    Only ``connections[0]`` is followed when advancing from a node. Further
    entries are kept for compatibility with stored flows but are currently
    unreachable unless routed through a logic block.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(description="Node identifier, unique within the graph")
    title: str = Field(default="", description="Display label")
    components: list[PageComponent] = Field(
        default_factory=list,
        validation_alias=AliasChoices("pageComponents", "components"),
        description="Ordered page components (top to bottom)",
    )
    connections: list[str] = Field(default_factory=list, description="Downstream target ids")

    @field_validator("components", mode="before")
    @classmethod
    def _normalize_components(cls, value: Any) -> Any:
        """Accept both the ordered list layout and the legacy object layout."""
        if value is None:
            return []
        if isinstance(value, dict):
            components = []
            for order, slot in enumerate(_LEGACY_COMPONENT_SLOTS):
                component = value.get(slot)
                if isinstance(component, dict):
                    components.append({**component, "order": order})
            return components
        if isinstance(value, list):
            return sorted(
                value,
                key=lambda c: (c.get("order") if isinstance(c, dict) else c.order) or 0,
            )
        # Stored flows carry a numeric component count under the same key
        return []

    @field_validator("connections", mode="before")
    @classmethod
    def _none_connections(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def next_id(self) -> str | None:
        """The single target followed on direct advance."""
        return self.connections[0] if self.connections else None

    @property
    def is_terminal(self) -> bool:
        return not self.connections


class LogicBlockConfig(BaseModel):
    """Variant-specific logic block parameters."""

    model_config = ConfigDict(extra="allow")

    conditions: list[str | None] = Field(
        default_factory=list, description="if-else: conditions, one per slot"
    )
    condition: str | None = Field(default=None, description="if-else: legacy single condition")
    paths: list[str | None] = Field(
        default_factory=list, description="multi-path: value per branch, positional"
    )
    threshold: float | None = Field(default=None, description="score-threshold: minimum score")

    @field_validator("conditions", "paths", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return [] if value is None else value


class LogicBlock(BaseModel):
    """A branching decision point, never shown to the end user.

    ``type`` is kept as a plain string so flows with an unknown variant still
    load; the evaluator routes them to "no next node".
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(description="Block identifier, unique within the graph")
    type: str = Field(description="if-else, multi-path, score-threshold or a-b-test")
    config: LogicBlockConfig = Field(default_factory=LogicBlockConfig)
    connections: list[str] = Field(
        default_factory=list, description="Positional targets; index carries branch meaning"
    )

    @field_validator("config", mode="before")
    @classmethod
    def _none_config(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("connections", mode="before")
    @classmethod
    def _none_connections(cls, value: Any) -> Any:
        return [] if value is None else value

    def target(self, index: int) -> str | None:
        """Connection at ``index`` if present and non-empty."""
        if 0 <= index < len(self.connections) and self.connections[index]:
            return self.connections[index]
        return None

    def target_or_first(self, index: int) -> str | None:
        """Connection at ``index``, falling back to the first connection."""
        return self.target(index) or self.target(0)


class FlowGraph(BaseModel):
    """A complete onboarding flow: nodes, logic blocks and their connections.

    Read-only during traversal. Lookups by id are indexed once on creation;
    when ids repeat, the first declaration wins.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: str = Field(description="Flow identifier")
    title: str = Field(default="", description="Flow title")
    active: bool = Field(default=True, description="Whether sessions may be started")
    nodes: list[Node] = Field(default_factory=list)
    logic_blocks: list[LogicBlock] = Field(
        default_factory=list,
        validation_alias=AliasChoices("logicBlocks", "logic_blocks"),
    )

    _nodes_by_id: dict[str, Node] = PrivateAttr(default_factory=dict)
    _blocks_by_id: dict[str, LogicBlock] = PrivateAttr(default_factory=dict)

    @field_validator("logic_blocks", "nodes", mode="before")
    @classmethod
    def _none_list(cls, value: Any) -> Any:
        return [] if value is None else value

    def model_post_init(self, __context: object) -> None:
        for node in self.nodes:
            self._nodes_by_id.setdefault(node.id, node)
        for block in self.logic_blocks:
            self._blocks_by_id.setdefault(block.id, block)

    def get_node(self, node_id: str | None) -> Node | None:
        if node_id is None:
            return None
        return self._nodes_by_id.get(node_id)

    def get_block(self, block_id: str | None) -> LogicBlock | None:
        if block_id is None:
            return None
        return self._blocks_by_id.get(block_id)

    def is_block(self, element_id: str) -> bool:
        return element_id in self._blocks_by_id

    def is_node(self, element_id: str) -> bool:
        return element_id in self._nodes_by_id

    def node_index(self, node_id: str) -> int:
        """Declaration index of a node, or -1."""
        for i, node in enumerate(self.nodes):
            if node.id == node_id:
                return i
        return -1


class FlowpathConfig(BaseModel):
    """Root configuration with DSL versioning."""

    version: str = Field(default=CURRENT_VERSION, description="DSL version")
    flows: dict[str, FlowGraph] = Field(default_factory=dict)
    settings: Settings = Field(default_factory=Settings)

    @model_validator(mode="before")
    @classmethod
    def _flow_ids_from_keys(cls, data: Any) -> Any:
        """Flows declared under a key take that key as their id unless set."""
        if not isinstance(data, dict):
            return data
        flows = data.get("flows")
        if isinstance(flows, dict):
            data = dict(data)
            data["flows"] = {
                key: ({"id": key, **flow} if isinstance(flow, dict) and "id" not in flow else flow)
                for key, flow in flows.items()
            }
        return data

    def model_post_init(self, __context: object) -> None:
        """Validate DSL version after initialization."""
        if self.version not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported DSL version: {self.version}. "
                f"Supported: {', '.join(sorted(SUPPORTED_VERSIONS))}"
            )
