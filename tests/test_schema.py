from typing import Any, Mapping, Optional, Sequence

import pulumi
import pulumi_aws as aws
import pulumi_random
import pytest

from errors import UnknownResourceTypeError
from schema import check_argument_types, check_arguments, expected_shapes, resolve_resource_type


def test_resolves_aws_kind() -> None:
    kind = resolve_resource_type("ec2.Vpc")
    assert kind.resource_class is aws.ec2.Vpc
    assert kind.args_class is aws.ec2.VpcArgs
    assert kind.accepts("cidr_block")
    assert kind.accepts("tags")


def test_resolves_prefixed_kinds() -> None:
    assert resolve_resource_type("aws:kinesis.Stream").resource_class is aws.kinesis.Stream
    assert resolve_resource_type("random:RandomId").resource_class is pulumi_random.RandomId


@pytest.mark.parametrize("kind", ["ec2.Nope", "nope.Vpc", "gcp:compute.Instance", "random:", ""])
def test_unknown_kind(kind: str) -> None:
    with pytest.raises(UnknownResourceTypeError):
        resolve_resource_type(kind)


def test_required_arguments_from_args_signature() -> None:
    assert "public_key" in resolve_resource_type("ec2.KeyPair").required_arguments
    assert "byte_length" in resolve_resource_type("random:RandomId").required_arguments
    assert "cidr_block" not in resolve_resource_type("ec2.Vpc").required_arguments


def test_check_arguments() -> None:
    problems = check_arguments("iam.RolePolicy", {"role": "x", "polcy": "{}"})
    assert "unknown argument 'polcy' for iam.RolePolicy" in problems
    assert "missing required argument 'policy' for iam.RolePolicy" in problems


def test_outputs() -> None:
    kind = resolve_resource_type("ec2.SpotInstanceRequest")
    assert kind.has_output("public_ip")
    assert kind.has_output("id")
    assert not kind.has_output("public_ipp")


def test_argument_types_match_annotations() -> None:
    assert check_argument_types(
        "ec2.Subnet",
        {"vpc_id": "vpc-123", "cidr_block": "10.0.1.0/24", "map_public_ip_on_launch": True},
    ) == []
    assert check_argument_types("ec2.Subnet", {"map_public_ip_on_launch": "yes"}) == [
        "argument 'map_public_ip_on_launch' for ec2.Subnet expects bool, got str"
    ]


def test_container_arguments() -> None:
    assert check_argument_types("ec2.SecurityGroup", {"ingress": [], "tags": {"a": "b"}}) == []
    assert check_argument_types("ec2.SecurityGroup", {"ingress": "all"}) == [
        "argument 'ingress' for ec2.SecurityGroup expects list, got str"
    ]
    assert check_argument_types("ec2.SecurityGroup", {"tags": ["a"]}) == [
        "argument 'tags' for ec2.SecurityGroup expects mapping, got list"
    ]


def test_optional_input_unwrapped() -> None:
    assert expected_shapes(Optional[pulumi.Input[int]]) == {"int"}
    assert expected_shapes(pulumi.Input[Sequence[pulumi.Input[str]]]) == {"list"}
    assert expected_shapes(Optional[pulumi.Input[Mapping[str, pulumi.Input[str]]]]) == {"mapping"}
    assert expected_shapes(Any) is None
