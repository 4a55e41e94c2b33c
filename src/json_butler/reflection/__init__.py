"""Member reflection and serialization policy."""

from .contract_resolver import ContractResolver, NonSerialized
from .member_reflector import MemberReflector

__all__ = ["ContractResolver", "NonSerialized", "MemberReflector"]
