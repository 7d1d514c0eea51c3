"""Table discovery in CloudFormation and Serverless templates."""

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from dynamodb_seed.core.models import TableDefinition

logger = logging.getLogger(__name__)

TABLE_RESOURCE_TYPE = "AWS::DynamoDB::Table"


class TemplateLoader(yaml.SafeLoader):
    """SafeLoader that accepts CloudFormation short-form tags (!Ref, !Sub, ...)."""


def _construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)

    # !GetAtt accepts "Resource.Attribute" in short form
    if tag_suffix == "GetAtt" and isinstance(value, str):
        value = value.split(".", 1)
    name = "Ref" if tag_suffix == "Ref" else f"Fn::{tag_suffix}"
    return {name: value}


TemplateLoader.add_multi_constructor("!", _construct_intrinsic)


def table_definitions_from_stack(stack: Mapping[str, Any]) -> list[TableDefinition]:
    """
    Extract table definitions from one stack.

    Args:
        stack: Mapping holding a ``Resources`` section

    Returns:
        One TableDefinition per AWS::DynamoDB::Table resource, in template order
    """
    resources = stack.get("Resources") or {}
    return [
        TableDefinition(resource.get("Properties") or {})
        for resource in resources.values()
        if isinstance(resource, Mapping) and resource.get("Type") == TABLE_RESOURCE_TYPE
    ]


def stacks_from_template(template: Mapping[str, Any]) -> list[Mapping[str, Any]]:
    """
    Collect the stacks declared by a template.

    A bare CloudFormation template is its own stack. A Serverless service
    file declares its stack under ``resources`` and may add more under
    ``custom.additionalStacks``.
    """
    if "Resources" in template:
        return [template]

    stacks: list[Mapping[str, Any]] = []
    resources = template.get("resources")
    if isinstance(resources, Mapping):
        stacks.append(resources)

    additional = (template.get("custom") or {}).get("additionalStacks") or {}
    stacks.extend(stack for stack in additional.values() if isinstance(stack, Mapping))
    return stacks


def load_template(path: str | Path) -> dict[str, Any]:
    """
    Load a YAML or JSON template.

    Raises:
        FileNotFoundError: If the template doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Template not found: {path}")

    with open(path) as f:
        if path.suffix == ".json":
            return json.load(f) or {}
        return yaml.load(f, Loader=TemplateLoader) or {}


def load_table_definitions(paths: Iterable[str | Path]) -> list[TableDefinition]:
    """
    Load table definitions from every template.

    Args:
        paths: Template file paths

    Returns:
        All table definitions, template by template
    """
    tables: list[TableDefinition] = []
    for path in paths:
        for stack in stacks_from_template(load_template(path)):
            tables.extend(table_definitions_from_stack(stack))
        logger.debug(f"Loaded table definitions from {path}")

    logger.info(f"DynamoDB - found {len(tables)} table definition(s)")
    return tables
