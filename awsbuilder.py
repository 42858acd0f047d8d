import pulumi
from typing import Any, Dict, List

from config import AWSResource, Config
from graph import build_dependency_graph
from references import REF_PREFIX, Reference, config_key, parse_reference, split_template
from schema import JSON_DOCUMENT_ARGS, ResourceKind, resolve_resource_type
from validation import validate_config

AWS_REGION_ABBREVIATIONS = {
    "us-east-1": "use1",
    "us-east-2": "use2",
    "us-west-1": "usw1",
    "us-west-2": "usw2",
    "af-south-1": "afs1",
    "ap-east-1": "ape1",
    "ap-south-1": "aps1",
    "ap-northeast-1": "apne1",
    "ap-northeast-2": "apne2",
    "ap-northeast-3": "apne3",
    "ap-southeast-1": "apse1",
    "ap-southeast-2": "apse2",
    "ca-central-1": "cac1",
    "eu-central-1": "euc1",
    "eu-west-1": "euw1",
    "eu-west-2": "euw2",
    "eu-west-3": "euw3",
    "eu-north-1": "eun1",
    "eu-south-1": "eus1",
    "me-south-1": "mes1",
    "sa-east-1": "sae1",
    "us-gov-east-1": "usge1",
    "us-gov-west-1": "usgw1",
    "cn-north-1": "cnn1",
    "cn-northwest-1": "cnnw1",
}

def get_abbreviation(region: str) -> str:
    return AWS_REGION_ABBREVIATIONS.get(region.lower(), region.split("-")[0].lower())

def lookup_output(ref: Reference, resources: Dict[str, Any]) -> Any:
    if ref.resource not in resources:
        raise ValueError(f"Referenced resource '{ref.resource}' not found.")
    resource_obj = resources[ref.resource]
    attr_val = getattr(resource_obj, ref.attribute, None)
    if attr_val is None:
        raise ValueError(f"Attribute '{ref.attribute}' not found on resource '{ref.resource}'")
    return attr_val

def resolve_value(value: Any, resources: Dict[str, Any]) -> Any:
    if isinstance(value, dict):
        return {k: resolve_value(v, resources) for k, v in value.items()}
    elif isinstance(value, list):
        return [resolve_value(item, resources) for item in value]
    elif isinstance(value, str):
        key = config_key(value)
        if key is not None:
            # Per-stack value from Pulumi config
            return pulumi.Config().require(key)
        elif value.startswith(REF_PREFIX):
            return lookup_output(parse_reference(value[len(REF_PREFIX):]), resources)
        parts = split_template(value)
        if not any(isinstance(p, Reference) for p in parts):
            return "".join(parts)
        return pulumi.Output.concat(
            *(lookup_output(p, resources) if isinstance(p, Reference) else p for p in parts)
        )
    else:
        return value

class AWSResourceBuilder:
    def __init__(self, config: Config):
        self.config = config
        self.resources: Dict[str, Any] = {}

    def generate_resource_name(self, base_name: str) -> str:
        team = self.config.team.strip().lower()
        service = self.config.service.strip().lower()
        env = self.config.environment.strip().lower()
        reg_abbr = get_abbreviation(self.config.region)
        return f"{team}-{service}-{env}-{reg_abbr}-{base_name}".lower()

    def resolve_args(self, args: dict) -> dict:
        resolved = {}
        for key, value in args.items():
            resolved_value = resolve_value(value, self.resources)
            if key in JSON_DOCUMENT_ARGS and isinstance(value, (dict, list)):
                resolved_value = pulumi.Output.json_dumps(resolved_value)
            resolved[key] = resolved_value
        return resolved

    def _apply_common_parameters(self, resolved_args: dict, kind: ResourceKind) -> dict:
        if kind.accepts("tags") and self.config.tags:
            resource_tags = resolved_args.get("tags") or {}
            resolved_args["tags"] = {**self.config.tags, **resource_tags}
        if kind.accepts("region"):
            resolved_args.setdefault("region", self.config.region)
        return resolved_args

    def _resource_options(self, resource_cfg: AWSResource) -> pulumi.ResourceOptions:
        depends_on: List[Any] = [self.resources[dep] for dep in resource_cfg.depends_on]
        return pulumi.ResourceOptions(depends_on=depends_on or None)

    def create(self, resource_cfg: AWSResource) -> Any:
        kind = resolve_resource_type(resource_cfg.type)
        resolved_args = self.resolve_args(resource_cfg.args)
        resolved_args = self._apply_common_parameters(resolved_args, kind)
        pulumi_name = resource_cfg.custom_name or self.generate_resource_name(resource_cfg.name)
        pulumi.log.debug(f"Resolved args for '{resource_cfg.name}': {sorted(resolved_args)}")
        resource_instance = kind.resource_class(
            pulumi_name,
            opts=self._resource_options(resource_cfg),
            **resolved_args,
        )
        self.resources[resource_cfg.name] = resource_instance
        pulumi.log.info(f"Created resource: {pulumi_name} ({resource_cfg.type})")
        return resource_instance

    def creation_order(self) -> List[str]:
        return build_dependency_graph(self.config).topological_order()

    def build(self):
        validate_config(self.config)
        declared = {r.name: r for r in self.config.aws_resources}
        for name in self.creation_order():
            self.create(declared[name])

    def export_outputs(self) -> Dict[str, Any]:
        exported = {}
        for export_name, expression in self.config.outputs.items():
            value = resolve_value(expression, self.resources)
            pulumi.export(export_name, value)
            exported[export_name] = value
        return exported
