"""Wire-format models for plans and change plans.

Trees travel as plain JSON dictionaries (see :class:`TextNode` and
:class:`ElementNode`); the validators are written against that loose shape
because model output and manual edits can contain anything. Plans and change
plans are parsed with pydantic so that operation variants are a tagged union.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import Annotated, TypedDict


class TextNode(TypedDict):
    id: str
    type: Literal["text"]
    text: str


class ElementNode(TypedDict, total=False):
    id: str
    type: str
    props: Dict[str, Any]
    children: List[Any]


Node = Union[TextNode, ElementNode]


class Plan(BaseModel):
    model_config = ConfigDict(extra="ignore")

    kind: Literal["plan"] = "plan"
    layout: str = ""
    components: List[str] = Field(default_factory=list)
    tree: Optional[Dict[str, Any]] = None

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump()


class _Operation(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class AddOperation(_Operation):
    op: Literal["add"]
    parent_id: str = Field(alias="parentId")
    position: Union[Literal["start", "end"], int] = "end"
    node: Dict[str, Any]


class RemoveOperation(_Operation):
    op: Literal["remove"]
    target_id: str = Field(alias="targetId")


class UpdateOperation(_Operation):
    op: Literal["update"]
    target_id: str = Field(alias="targetId")
    props: Optional[Dict[str, Any]] = None
    text: Optional[str] = None
    children: Optional[List[Any]] = None


Operation = Annotated[
    Union[AddOperation, RemoveOperation, UpdateOperation],
    Field(discriminator="op"),
]


class ChangePlan(BaseModel):
    model_config = ConfigDict(extra="ignore")

    kind: Literal["change_plan"] = "change_plan"
    summary: str = ""
    operations: List[Operation] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
