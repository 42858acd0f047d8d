"""Lookup of resource kinds in the provider SDKs.

A kind is written ``<module>.<Class>`` for AWS (``ec2.Vpc``) or with an
explicit provider prefix (``aws:s3.Bucket``, ``random:RandomId``).
"""

import collections.abc
import inspect
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, List, Optional, Set, Tuple, Union

import pulumi
import pulumi_aws as aws
import pulumi_random

from errors import UnknownResourceTypeError
from references import config_key, find_references

PROVIDERS = {
    "aws": aws,
    "random": pulumi_random,
}
DEFAULT_PROVIDER = "aws"

# Present on every resource regardless of its schema.
COMMON_OUTPUTS = {"id", "urn"}

# IAM documents may be written as YAML mappings and are sent as JSON strings.
JSON_DOCUMENT_ARGS = {"policy", "assume_role_policy"}

_UNION_ORIGINS = (Union, getattr(types, "UnionType", Union))


@dataclass(frozen=True)
class ResourceKind:
    type: str
    resource_class: Any
    args_class: Any

    @property
    def argument_names(self) -> Set[str]:
        return _argument_names(self.args_class)[0]

    @property
    def required_arguments(self) -> Set[str]:
        return _argument_names(self.args_class)[1]

    def accepts(self, argument: str) -> bool:
        return argument in self.argument_names

    def has_output(self, attribute: str) -> bool:
        if attribute in COMMON_OUTPUTS:
            return True
        return isinstance(getattr(self.resource_class, attribute, None), property)


def _split_type(resource_type: str) -> Tuple[str, List[str]]:
    provider, sep, path = resource_type.partition(":")
    if not sep:
        provider, path = DEFAULT_PROVIDER, resource_type
    return provider, [p for p in path.split(".") if p]


@lru_cache(maxsize=None)
def _argument_names(args_class: Any) -> Tuple[Set[str], Set[str]]:
    sig = inspect.signature(args_class.__init__)
    params = list(sig.parameters.values())[1:]
    names = {p.name for p in params if p.kind in (p.KEYWORD_ONLY, p.POSITIONAL_OR_KEYWORD)}
    required = {p.name for p in params if p.name in names and p.default is p.empty}
    return names, required


@lru_cache(maxsize=None)
def resolve_resource_type(resource_type: str) -> ResourceKind:
    """Find the resource class and its Args class for a kind string."""
    provider, path = _split_type(resource_type)
    target = PROVIDERS.get(provider)
    if target is None or not path:
        raise UnknownResourceTypeError(resource_type)
    try:
        for part in path[:-1]:
            target = getattr(target, part)
        resource_class = getattr(target, path[-1])
        args_class = getattr(target, f"{path[-1]}Args")
    except AttributeError as e:
        raise UnknownResourceTypeError(resource_type) from e
    if not inspect.isclass(resource_class) or not inspect.isclass(args_class):
        raise UnknownResourceTypeError(resource_type)
    return ResourceKind(resource_type, resource_class, args_class)


def check_arguments(resource_type: str, args: Dict[str, Any]) -> List[str]:
    """Report unknown and missing required arguments for a kind."""
    kind = resolve_resource_type(resource_type)
    problems = []
    for key in sorted(set(args) - kind.argument_names):
        problems.append(f"unknown argument '{key}' for {resource_type}")
    for key in sorted(kind.required_arguments - set(args)):
        problems.append(f"missing required argument '{key}' for {resource_type}")
    return problems


_SEQUENCE_ORIGINS = (list, tuple, collections.abc.Sequence)
_MAPPING_ORIGINS = (dict, collections.abc.Mapping, collections.abc.MutableMapping)


def _union_arms(annotation: Any) -> List[Any]:
    if typing.get_origin(annotation) in _UNION_ORIGINS:
        arms = []
        for arm in typing.get_args(annotation):
            arms.extend(_union_arms(arm))
        return arms
    return [annotation]


def _arm_shapes(arm: Any) -> Optional[Set[str]]:
    """Literal shapes one union arm admits; empty for engine-only arms, None if unknown."""
    if arm is type(None):
        return set()
    if isinstance(arm, (str, typing.ForwardRef)):
        text = arm if isinstance(arm, str) else arm.__forward_arg__
        if text.startswith(("Output", "Awaitable")):
            return set()
        if text.endswith(("Args", "ArgsDict")):
            return {"mapping"}
        return None
    origin = typing.get_origin(arm)
    if origin is collections.abc.Awaitable or arm is pulumi.Output or origin is pulumi.Output:
        return set()
    if origin in _SEQUENCE_ORIGINS or arm in _SEQUENCE_ORIGINS:
        return {"list"}
    if origin in _MAPPING_ORIGINS or arm in _MAPPING_ORIGINS:
        return {"mapping"}
    if not inspect.isclass(arm):
        return None
    if arm is bool:
        return {"bool"}
    if issubclass(arm, str):
        return {"str"}
    if arm is int:
        return {"int"}
    if arm is float:
        return {"float"}
    if issubclass(arm, dict) or arm.__name__.endswith("Args"):
        return {"mapping"}
    return None


def expected_shapes(annotation: Any) -> Optional[Set[str]]:
    """Unwrap Optional/pulumi.Input and return the literal shapes accepted."""
    shapes: Set[str] = set()
    for arm in _union_arms(annotation):
        arm_shapes = _arm_shapes(arm)
        if arm_shapes is None:
            return None
        shapes.update(arm_shapes)
    return shapes or None


def literal_shape(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "str"
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "mapping"
    return None


@lru_cache(maxsize=None)
def _argument_annotations(args_class: Any) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(args_class.__init__)
    except (NameError, TypeError):
        # forward references the SDK only imports for type checkers; keep them unevaluated
        sig = inspect.signature(args_class.__init__)
        return {p.name: p.annotation for p in sig.parameters.values() if p.annotation is not p.empty}


def _is_expression(value: Any) -> bool:
    return isinstance(value, str) and (config_key(value) is not None or bool(find_references(value)))


def check_argument_types(resource_type: str, args: Dict[str, Any]) -> List[str]:
    """Report literal arguments whose shape does not match the Args annotation."""
    kind = resolve_resource_type(resource_type)
    annotations = _argument_annotations(kind.args_class)
    problems = []
    for key in sorted(args):
        value = args[key]
        if key not in annotations or value is None or _is_expression(value):
            continue
        expected = expected_shapes(annotations[key])
        actual = literal_shape(value)
        if expected is None or actual is None:
            continue
        if key in JSON_DOCUMENT_ARGS and actual in ("mapping", "list"):
            continue
        if actual in expected or (actual == "int" and "float" in expected):
            continue
        wanted = " or ".join(sorted(expected))
        problems.append(f"argument '{key}' for {resource_type} expects {wanted}, got {actual}")
    return problems
