"""Shared fixtures; every test runs against Pulumi mocks, never a real engine."""

from pathlib import Path
from typing import Callable

import pulumi
import pytest

from config import Config, load_config

PROJECT = "trafficsim"
REPO_ROOT = Path(__file__).resolve().parent.parent
STACK_CONFIG = REPO_ROOT / "config.yaml"


class StackMocks(pulumi.runtime.Mocks):
    """Echo inputs back as outputs and fill in the computed outputs we read."""

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = dict(args.inputs)
        outputs.setdefault("name", args.name)
        outputs.setdefault("arn", f"arn:aws:mock:::{args.name}")
        if args.typ == "aws:ec2/spotInstanceRequest:SpotInstanceRequest":
            outputs["publicIp"] = "203.0.113.10"
        if args.typ == "random:index/randomId:RandomId":
            outputs["hex"] = "a1b2c3d4"
        if args.typ == "aws:ec2/keyPair:KeyPair":
            outputs.setdefault("keyName", args.name)
        return [f"{args.name}-id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        return {}


pulumi.runtime.set_mocks(StackMocks(), project=PROJECT, stack="test", preview=False)
pulumi.runtime.set_config(f"{PROJECT}:amiId", "ami-0123456789abcdef0")
pulumi.runtime.set_config(f"{PROJECT}:instanceType", "t3.micro")
pulumi.runtime.set_config(f"{PROJECT}:sshPublicKey", "ssh-ed25519 AAAATEST tests@localhost")


@pytest.fixture
def stack_config() -> Config:
    return load_config(str(STACK_CONFIG))


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[[str], Config]:
    """Factory fixture: write YAML, return loaded Config."""

    def _make(yaml_str: str) -> Config:
        path = tmp_path / "config.yaml"
        path.write_text(yaml_str)
        return load_config(str(path))

    return _make


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str], Path]:
    def _write(yaml_str: str) -> Path:
        path = tmp_path / "config.yaml"
        path.write_text(yaml_str)
        return path

    return _write
