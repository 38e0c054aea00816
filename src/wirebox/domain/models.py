from typing import Any, Hashable, List

from pydantic import BaseModel, ConfigDict, Field

# A key under which a capability is requested: a string or a class.
Identifier = Hashable


class Binding(BaseModel):
    """Value object representing an abstract -> concrete registration.

    Attributes:
        concrete: A factory function or an identifier to construct.
        shared: Whether the resolved object is cached and reused.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    concrete: Any = Field(..., description="Factory function or identifier used to satisfy the abstract.")
    shared: bool = Field(default=False, description="Whether the resolved object is cached.")


class Tag(BaseModel):
    """A named, ordered group of abstract identifiers.

    Attributes:
        name: The tag name.
        members: Tagged abstracts in registration order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="The tag name.")
    members: List[Any] = Field(default_factory=list, description="Tagged abstracts in registration order.")

    def add(self, abstract: Identifier) -> None:
        """Append an abstract to the tag."""
        self.members.append(abstract)
