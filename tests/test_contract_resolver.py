"""Tests for contract resolver."""

import dataclasses
import json
from typing import Annotated, ClassVar, List

import pytest
from json_butler.reflection import ContractResolver, NonSerialized
from json_butler.reflection.contract_resolver import root_package
from json_butler.types import (
    ContractResolverSettings,
    CyclicReferenceError,
    Formatting,
    ReferenceLoopHandling,
    SerializationMode,
    TypeHandle,
)


class Base:
    shared: int


class Derived(Base):
    own: str


class TestContractResolver:
    """Tests for ContractResolver class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.resolver = ContractResolver()

    def test_default_settings(self):
        """Test default serialization rules."""
        settings = self.resolver.settings
        assert settings.serialization_mode == SerializationMode.DECLARED_ONLY
        assert settings.reference_loop_handling == ReferenceLoopHandling.IGNORE
        assert settings.formatting == Formatting.INDENTED

    def test_private_members_excluded(self):
        """Test underscore members are never serialized."""
        assert not self.resolver.include_member(Derived, Derived, "_own", str)

    def test_static_members_excluded(self):
        """Test class variables and init-only fields are excluded."""
        assert self.resolver.is_static(ClassVar[int])
        assert self.resolver.is_static(ClassVar)
        assert self.resolver.is_static("ClassVar[int]")
        assert self.resolver.is_static("typing.ClassVar[int]")
        assert self.resolver.is_static(dataclasses.InitVar(int))
        assert not self.resolver.is_static(int)
        assert not self.resolver.is_static(List[int])

    def test_non_serialized_markers(self):
        """Test the NonSerialized marker and serialize metadata."""
        assert self.resolver.is_non_serialized(Annotated[int, NonSerialized])
        assert self.resolver.is_non_serialized(Annotated[int, NonSerialized()])
        assert not self.resolver.is_non_serialized(Annotated[int, "doc"])
        assert not self.resolver.include_member(Derived, Derived, "own", str, {"serialize": False})
        assert self.resolver.include_member(Derived, Derived, "own", str, {"serialize": True})

    def test_inherited_members_by_mode(self):
        """Test inherited members depend on the serialization mode."""
        dynamic = ContractResolver(ContractResolverSettings(serialization_mode=SerializationMode.RESOLVED_DYNAMIC))

        assert self.resolver.include_member(Derived, Base, "shared", int)
        assert not dynamic.include_member(Derived, Base, "shared", int)
        assert dynamic.include_member(Derived, Derived, "own", str)

    def test_related_base(self):
        """Test bases are related when they share a top-level package."""
        assert self.resolver.is_related_base(Derived, Base)
        assert not self.resolver.is_related_base(Derived, dict)
        assert root_package(json.JSONDecoder) == "json"

    def test_cycle_ignored(self):
        """Test the ignore policy lets projection continue."""
        self.resolver.on_cycle(Derived, ["Derived", "Derived"])

    def test_cycle_error(self):
        """Test the error policy raises with the loop path."""
        resolver = ContractResolver(ContractResolverSettings(reference_loop_handling=ReferenceLoopHandling.ERROR))

        with pytest.raises(CyclicReferenceError) as exc_info:
            resolver.on_cycle(Derived, ["Derived", "Derived"])

        assert exc_info.value.path == ["Derived", "Derived"]
        assert "Self referencing loop detected" in str(exc_info.value)

    def test_dump_options(self):
        """Test formatting maps onto json.dumps options."""
        compact = ContractResolver(ContractResolverSettings(formatting=Formatting.COMPACT))
        value = {"naïve": [1, 2]}

        assert json.dumps(value, **compact.dump_options()) == '{"naïve":[1,2]}'
        assert json.dumps(value, **self.resolver.dump_options()) == '{\n  "naïve": [\n    1,\n    2\n  ]\n}'

    def test_unbuilt_handle_forces_dynamic_mode(self):
        """Test settings for unbuilt handles switch to the dynamic mode."""
        settings = ContractResolverSettings(formatting=Formatting.COMPACT)

        unbuilt = settings.for_handle(TypeHandle(qualified_name="a.B", type=Derived, is_built=False))
        built = settings.for_handle(TypeHandle(qualified_name="a.B", type=Derived))

        assert unbuilt.serialization_mode == SerializationMode.RESOLVED_DYNAMIC
        assert unbuilt.formatting == Formatting.COMPACT
        assert built is settings
