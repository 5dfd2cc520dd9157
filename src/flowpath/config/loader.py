"""Config loader for YAML configuration and flow graph files."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from flowpath.config.models import FlowGraph, FlowpathConfig
from flowpath.core.errors import ConfigError

FLOW_FILE_SUFFIXES = (".yaml", ".yml", ".json")


def _read_document(path: Path) -> Any:
    """Parse a YAML or JSON file (JSON is valid YAML, but json is stricter and faster)."""
    with open(path, encoding="utf-8") as f:
        if path.suffix == ".json":
            return json.load(f)
        return yaml.safe_load(f)


class ConfigLoader:
    """Load FlowpathConfig and FlowGraph instances from disk."""

    @staticmethod
    def load(path: Path | str) -> FlowpathConfig:
        """Load configuration from a YAML file or a directory of YAML files.

        Args:
            path: Path to config directory or flowpath.yaml file

        Returns:
            Parsed FlowpathConfig instance

        Raises:
            FileNotFoundError: If the path holds no configuration.
            ConfigError: If the configuration is malformed.
        """
        config_path = Path(path)

        data: dict[str, Any] = {"flows": {}, "settings": {}}

        if config_path.is_dir():
            yaml_file = config_path / "flowpath.yaml"
            if not yaml_file.exists():
                yaml_file = config_path / "config.yaml"

            if yaml_file.exists():
                data = _read_document(yaml_file) or {}
            else:
                # Merge all .yaml files in directory
                files = sorted(config_path.glob("*.yaml"))
                if not files:
                    raise FileNotFoundError(f"No config files found in {config_path}")

                for fpath in files:
                    chunk = _read_document(fpath) or {}

                    if "flows" in chunk and isinstance(chunk["flows"], dict):
                        data["flows"].update(chunk["flows"])

                    if "settings" in chunk and isinstance(chunk["settings"], dict):
                        data["settings"].update(chunk["settings"])

                    # Overwrite other top-level keys (e.g. version)
                    for k, v in chunk.items():
                        if k not in ("flows", "settings"):
                            data[k] = v
        else:
            if not config_path.exists():
                raise FileNotFoundError(f"Config file not found: {config_path}")
            data = _read_document(config_path) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"Config root must be a mapping: {config_path}")

        try:
            return FlowpathConfig.model_validate(data)
        except (ValidationError, ValueError) as e:
            raise ConfigError(f"Invalid configuration in {config_path}: {e}") from e

    @staticmethod
    def load_graph(path: Path | str, flow_id: str | None = None) -> FlowGraph:
        """Load a single flow graph from YAML or JSON.

        The stored flow document may either be the graph itself or wrap it
        under ``flow_data`` (the shape the flows table keeps). The id falls
        back to ``flow_id`` and then to the file stem.

        Raises:
            FileNotFoundError: If the file does not exist.
            ConfigError: If the document is not a valid flow graph.
        """
        graph_path = Path(path)
        if not graph_path.exists():
            raise FileNotFoundError(f"Flow file not found: {graph_path}")

        data = _read_document(graph_path)
        if not isinstance(data, dict):
            raise ConfigError(f"Flow document must be a mapping: {graph_path}")

        flow_data = data.get("flow_data")
        if isinstance(flow_data, dict):
            data = {**{k: v for k, v in data.items() if k != "flow_data"}, **flow_data}

        data.setdefault("id", flow_id or graph_path.stem)

        try:
            return FlowGraph.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid flow graph in {graph_path}: {e}") from e

    @staticmethod
    def load_flows(path: Path | str) -> dict[str, FlowGraph]:
        """Load every flow reachable from ``path``.

        Accepts a configuration (file or directory) or a single flow file.
        A configuration whose settings name a ``flows_dir`` contributes the
        graphs found there as well; inline flows win on id clashes.

        Raises:
            FileNotFoundError: If the path does not exist.
            ConfigError: If a document is malformed.
        """
        source = Path(path)
        if source.is_file() and source.suffix in FLOW_FILE_SUFFIXES:
            document = _read_document(source)
            if isinstance(document, dict) and ("nodes" in document or "flow_data" in document):
                graph = ConfigLoader.load_graph(source)
                return {graph.id: graph}

        config = ConfigLoader.load(source)
        flows: dict[str, FlowGraph] = {}
        flows_dir = config.settings.flows_dir
        if flows_dir:
            directory = Path(flows_dir)
            if not directory.is_absolute() and source.is_file():
                directory = source.parent / directory
            for flow_file in sorted(directory.iterdir()) if directory.is_dir() else []:
                if flow_file.suffix in FLOW_FILE_SUFFIXES:
                    graph = ConfigLoader.load_graph(flow_file)
                    flows[graph.id] = graph
        flows.update(config.flows)
        return flows
