"""Tests for member reflector."""

import dataclasses
from typing import Annotated, Any, ClassVar, List, Optional

import pytest
from json_butler.reflection import ContractResolver, MemberReflector, NonSerialized
from json_butler.types import (
    ContractResolverSettings,
    Provenance,
    SerializationMode,
    TypeHandle,
    TypeResolutionError,
)


@dataclasses.dataclass
class Address:
    street: str
    zip_code: str = dataclasses.field(default="", metadata={"json": "zip"})


@dataclasses.dataclass
class Person:
    name: str
    age: int
    address: Optional[Address] = None
    tags: List[str] = dataclasses.field(default_factory=list)
    _secret: str = ""
    registry: ClassVar[dict] = {}
    token: Annotated[str, NonSerialized] = ""
    cache: dict = dataclasses.field(default_factory=dict, metadata={"serialize": False})

    @property
    def display_name(self) -> str:
        return self.name.title()


@dataclasses.dataclass
class Employee(Person):
    employee_id: int = 0


ExternalBase = type("ExternalBase", (), {"__annotations__": {"tenant": str}, "__module__": "vendor.models"})


class Contractor(ExternalBase):
    company: str


class Draft:
    title: "str"
    owner: "MissingOwner"  # noqa: F821


def reflect(cls, mode=SerializationMode.DECLARED_ONLY):
    resolver = ContractResolver(ContractResolverSettings(serialization_mode=mode))
    return MemberReflector().reflect_type(cls, resolver)


class TestMemberReflector:
    """Tests for MemberReflector class."""

    def test_serializable_members_in_declaration_order(self):
        """Test private, static and excluded members are skipped."""
        names = [member.name for member in reflect(Person)]
        assert names == ["name", "age", "address", "tags", "display_name"]

    def test_member_shapes(self):
        """Test optional, collection and property members are described."""
        members = {member.name: member for member in reflect(Person)}

        assert members["name"].type_ref is str
        assert members["address"].type_ref is Address
        assert members["address"].optional
        assert members["tags"].type_ref is str
        assert members["tags"].is_collection
        assert members["display_name"].type_ref is str
        assert members["name"].provenance == Provenance.GENERATED

    def test_json_name_from_field_metadata(self):
        """Test field metadata renames the JSON member."""
        members = reflect(Address)
        assert [(m.name, m.json_name) for m in members] == [("street", "street"), ("zip_code", "zip")]

    def test_declared_only_includes_related_bases(self):
        """Test inherited members of same-package bases are visible."""
        members = reflect(Employee)

        assert [m.name for m in members] == ["name", "age", "address", "tags", "display_name", "employee_id"]
        inherited = [m for m in members if m.is_inherited]
        assert {m.declaring_type for m in inherited} == {Person}
        assert all(m.provenance == Provenance.EXTERNAL for m in inherited)

    def test_resolved_dynamic_only_own_members(self):
        """Test the dynamic mode hides every inherited member."""
        members = reflect(Employee, SerializationMode.RESOLVED_DYNAMIC)
        assert [m.name for m in members] == ["employee_id"]

    def test_resolved_dynamic_is_subset_of_declared_only(self):
        """Test switching to the dynamic mode never adds members."""
        for cls in (Person, Employee, Contractor, Address):
            dynamic = {m.name for m in reflect(cls, SerializationMode.RESOLVED_DYNAMIC)}
            declared = {m.name for m in reflect(cls)}
            assert dynamic <= declared

    def test_unrelated_base_is_skipped(self):
        """Test members inherited from another package are not visible."""
        assert [m.name for m in reflect(Contractor)] == ["company"]

    def test_unresolvable_annotations_become_untyped(self):
        """Test only forward references that cannot be evaluated fall back to Any."""
        members = reflect(Draft)

        assert [m.name for m in members] == ["title", "owner"]
        assert [m.type_ref for m in members] == [str, Any]

    def test_reflect_without_type(self):
        """Test a handle without a type is rejected."""
        resolver = ContractResolver()
        with pytest.raises(TypeResolutionError) as exc_info:
            MemberReflector().reflect(TypeHandle(qualified_name="missing.Type", type=None), resolver)
        assert exc_info.value.qualified_name == "missing.Type"

    def test_reflect_handle(self):
        """Test reflecting through a handle."""
        handle = TypeHandle(qualified_name="tests.Address", type=Address)
        assert len(MemberReflector().reflect(handle, ContractResolver())) == 2
