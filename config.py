"""
This module defines the data structures for our configuration and the
loader that turns config.yaml into them.
"""

import yaml
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from errors import ConfigurationError, DuplicateResourceError

REQUIRED_KEYS = ["team", "service", "environment", "region"]

@dataclass
class AWSResource:
    name: str
    type: str
    args: Dict[str, Any] = field(default_factory=dict)
    custom_name: Optional[str] = None
    depends_on: List[str] = field(default_factory=list)

@dataclass
class Config:
    team: str
    service: str
    environment: str
    region: str
    tags: Dict[str, str] = field(default_factory=dict)
    aws_resources: List[AWSResource] = field(default_factory=list)
    outputs: Dict[str, str] = field(default_factory=dict)

    def resource(self, name: str) -> Optional[AWSResource]:
        for resource in self.aws_resources:
            if resource.name == name:
                return resource
        return None


def _parse_resource(index: int, entry: Any) -> AWSResource:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"aws_resources[{index}] must be a mapping")
    name = entry.get("name")
    if not isinstance(name, str) or not name:
        raise ConfigurationError(f"aws_resources[{index}] is missing a 'name'")
    resource_type = entry.get("type")
    if not isinstance(resource_type, str) or not resource_type:
        raise ConfigurationError(f"Resource '{name}' is missing a 'type'")

    args = entry.get("args") or {}
    if not isinstance(args, dict):
        raise ConfigurationError(f"Resource '{name}': 'args' must be a mapping")

    custom_name = entry.get("custom_name")
    if custom_name is not None and not isinstance(custom_name, str):
        raise ConfigurationError(f"Resource '{name}': 'custom_name' must be a string")

    depends_on = entry.get("depends_on") or []
    if not isinstance(depends_on, list) or not all(isinstance(d, str) for d in depends_on):
        raise ConfigurationError(f"Resource '{name}': 'depends_on' must be a list of names")

    return AWSResource(
        name=name,
        type=resource_type,
        args=args,
        custom_name=custom_name,
        depends_on=depends_on,
    )


def parse_config(config_data: Any) -> Config:
    """Validate the shape of raw YAML data and build a Config."""
    if not isinstance(config_data, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    # Ensure required keys exist
    for key in REQUIRED_KEYS:
        if key not in config_data:
            raise ConfigurationError(f"Missing required configuration key: {key}")
        if not isinstance(config_data[key], str):
            raise ConfigurationError(f"Configuration key '{key}' must be a string")

    tags = config_data.get("tags") or {}
    if not isinstance(tags, dict):
        raise ConfigurationError("'tags' must be a mapping")
    # an empty YAML value (`Owner:`) is an empty tag, not "None"
    tags = {str(k): "" if v is None else str(v) for k, v in tags.items()}

    raw_resources = config_data.get("aws_resources") or []
    if not isinstance(raw_resources, list):
        raise ConfigurationError("'aws_resources' must be a list")

    resources: List[AWSResource] = []
    seen = set()
    for index, entry in enumerate(raw_resources):
        resource = _parse_resource(index, entry)
        if resource.name in seen:
            raise DuplicateResourceError(resource.name)
        seen.add(resource.name)
        resources.append(resource)

    outputs = config_data.get("outputs") or {}
    if not isinstance(outputs, dict) or not all(isinstance(v, str) for v in outputs.values()):
        raise ConfigurationError("'outputs' must map export names to expressions")

    return Config(
        team=config_data["team"],
        service=config_data["service"],
        environment=config_data["environment"],
        region=config_data["region"],
        tags=tags,
        aws_resources=resources,
        outputs=dict(outputs),
    )


def load_config(file_path: str) -> Config:
    """Load and validate YAML configuration from the given file path."""
    try:
        with open(file_path, "r") as file:
            config_data = yaml.safe_load(file)
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file '{file_path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in '{file_path}': {e}") from e

    return parse_config(config_data)
