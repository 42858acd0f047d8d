"""Static checks run before anything is registered with the engine."""

from typing import List

from config import Config
from errors import DependencyCycleError, UnknownResourceTypeError, ValidationError
from graph import build_dependency_graph
from references import Reference, find_references
from schema import check_argument_types, check_arguments, resolve_resource_type


def _check_reference(config: Config, owner: str, ref: Reference) -> List[str]:
    target = config.resource(ref.resource)
    if target is None:
        return [f"{owner}: reference to undeclared resource '{ref.resource}'"]
    try:
        kind = resolve_resource_type(target.type)
    except UnknownResourceTypeError:
        # reported against the target itself
        return []
    if not kind.has_output(ref.attribute):
        return [f"{owner}: {target.type} has no attribute '{ref.attribute}' (in '{ref}')"]
    return []


def collect_problems(config: Config) -> List[str]:
    """Return a human-readable list of everything wrong with the declaration."""
    problems: List[str] = []

    for resource in config.aws_resources:
        try:
            resolve_resource_type(resource.type)
        except UnknownResourceTypeError as e:
            problems.append(f"{resource.name}: {e}")
        else:
            problems.extend(f"{resource.name}: {p}" for p in check_arguments(resource.type, resource.args))
            problems.extend(f"{resource.name}: {p}" for p in check_argument_types(resource.type, resource.args))

        for ref in find_references(resource.args):
            problems.extend(_check_reference(config, resource.name, ref))

        for dep in resource.depends_on:
            if config.resource(dep) is None:
                problems.append(f"{resource.name}: depends_on undeclared resource '{dep}'")

    for export_name, expression in config.outputs.items():
        for ref in find_references(expression):
            problems.extend(_check_reference(config, f"output '{export_name}'", ref))

    try:
        build_dependency_graph(config).topological_order()
    except DependencyCycleError as e:
        problems.append(str(e))

    return problems


def validate_config(config: Config) -> None:
    """Raise ValidationError listing every problem found, if any."""
    problems = collect_problems(config)
    if problems:
        raise ValidationError(problems)
