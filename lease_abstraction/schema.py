from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, create_model

NodeType = Literal["string", "object", "array"]
Granularity = Literal["atomic", "expand"]


@dataclass(frozen=True)
class SchemaNode:
    """
    One node of the declarative target schema.

    Objects carry `children`, arrays carry an `items` object node. A top-level
    section with granularity "expand" is extracted one child at a time.
    """

    key: str
    type: NodeType = "string"
    description: Optional[str] = None
    children: Tuple["SchemaNode", ...] = ()
    items: Optional["SchemaNode"] = None
    granularity: Granularity = "atomic"
    catch_all: bool = False
    required: bool = False

    def child(self, key: str) -> "SchemaNode":
        for node in self.children:
            if node.key == key:
                return node
        raise KeyError(key)

    def empty_value(self) -> Any:
        if self.type == "array":
            return []
        if self.type == "object":
            return {}
        return ""


def string(key: str, description: Optional[str] = None) -> SchemaNode:
    return SchemaNode(key=key, type="string", description=description)


def obj(
    key: str,
    *children: SchemaNode,
    description: Optional[str] = None,
    granularity: Granularity = "atomic",
    catch_all: bool = False,
) -> SchemaNode:
    return SchemaNode(
        key=key,
        type="object",
        description=description,
        children=tuple(children),
        granularity=granularity,
        catch_all=catch_all,
    )


def array(
    key: str,
    *item_fields: SchemaNode,
    description: Optional[str] = None,
    catch_all: bool = False,
) -> SchemaNode:
    return SchemaNode(
        key=key,
        type="array",
        description=description,
        items=obj(f"{key}Item", *item_fields),
        catch_all=catch_all,
    )


def title_case(key: str) -> str:
    """`leaseTermAndDates` -> `Lease Term And Dates`."""
    if not key:
        return ""
    spaced = re.sub(r"([A-Z])", r" \1", key)
    return spaced[0].upper() + spaced[1:]


@dataclass(frozen=True)
class ExtractionUnit:
    key: str
    schema: SchemaNode
    label: str
    section: Optional[str] = None
    catch_all: bool = False

    @property
    def response_shape(self) -> SchemaNode:
        """Object that must contain exactly this unit's key."""
        return obj("response", replace(self.schema, required=True))


def partition(schema: SchemaNode) -> List[ExtractionUnit]:
    """
    Split the target schema into ordered extraction units.

    Atomic sections become one unit each; an expanded section becomes one unit
    per child, in declaration order.
    """
    units: List[ExtractionUnit] = []
    for section in schema.children:
        section_label = title_case(section.key)
        if section.granularity == "expand":
            for clause in section.children:
                units.append(
                    ExtractionUnit(
                        key=clause.key,
                        schema=clause,
                        label=f"{section_label}: {title_case(clause.key)}",
                        section=section.key,
                        catch_all=clause.catch_all,
                    )
                )
        else:
            units.append(
                ExtractionUnit(
                    key=section.key,
                    schema=section,
                    label=section_label,
                    catch_all=section.catch_all,
                )
            )
    return units


def validate_schema(schema: SchemaNode) -> None:
    """Check the structural rules the partitioner relies on."""
    if schema.type != "object":
        raise ValueError("Root schema must be an object")
    keys = [section.key for section in schema.children]
    if len(keys) != len(set(keys)):
        raise ValueError("Duplicate top-level section keys")
    for section in schema.children:
        if section.granularity != "expand":
            continue
        if section.type != "object" or not section.children:
            raise ValueError(f"Expanded section '{section.key}' must be an object with children")
        catch_alls = [c.key for c in section.children if c.catch_all]
        if len(catch_alls) != 1:
            raise ValueError(
                f"Expanded section '{section.key}' needs exactly one catch-all clause, got {catch_alls}"
            )


def _model_name(path: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[^A-Za-z0-9]+", path) if part)


def _field_type(node: SchemaNode, path: str) -> Any:
    if node.type == "string":
        return str
    if node.type == "object":
        return build_model(node, name=_model_name(path))
    if node.type == "array":
        if node.items is None:
            raise ValueError(f"Array field '{node.key}' declared without items")
        return List[build_model(node.items, name=_model_name(f"{path}_item"))]  # type: ignore[misc]
    raise ValueError(f"Unsupported node type: {node.type}")


def build_model(node: SchemaNode, *, name: Optional[str] = None) -> type[BaseModel]:
    """
    Build a Pydantic model for an object node.

    Used as the structured output type of the generation agent. Fields are
    optional unless the node is marked required.
    """
    if node.type != "object":
        raise ValueError(f"Cannot build a model from a {node.type} node")

    model_name = name or _model_name(node.key)
    model_fields: Dict[str, Tuple[Any, Any]] = {}
    for child in node.children:
        t = _field_type(child, f"{model_name}_{child.key}")
        if child.required:
            model_fields[child.key] = (t, Field(..., description=child.description))
        else:
            model_fields[child.key] = (Optional[t], Field(default=None, description=child.description))

    class _BaseSectionModel(BaseModel):
        model_config = {"extra": "forbid"}

    return create_model(  # type: ignore[call-overload]
        model_name,
        __base__=_BaseSectionModel,
        **model_fields,
    )
