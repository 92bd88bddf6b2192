"""JSON schema helpers for the tool parameter contract shared with the remote agent."""

from typing import Any, Dict, Type

import jsonref  # type: ignore
from pydantic import BaseModel

from ...logger import get_logger

logger = get_logger(__name__)

_METADATA_KEYS = ("$defs", "$schema", "$id", "title", "definitions")


class SchemaValidator:
    """
    Builds and cleans the parameter schemas advertised for each tool.
    """

    @staticmethod
    def schema_for(args_model: Type[BaseModel]) -> Dict[str, Any]:
        """Produce a self-contained parameter schema for a tool's argument model.

        Wire (alias) names are used for properties, ``$ref``s are inlined, and metadata is stripped.

        Args:
            args_model: The pydantic model generated for a tool's parameters.

        Returns:
            The sanitized JSON schema.
        """
        raw_schema = args_model.model_json_schema(by_alias=True)

        # proxies=False ensures we get a plain dict back, not JsonRef objects
        resolved = jsonref.replace_refs(raw_schema, proxies=False)
        return SchemaValidator.sanitize_schema(resolved)

    @staticmethod
    def sanitize_schema(schema: Any) -> Any:
        """
        Cleans up a schema for the remote tool contract.
        Removes $defs, $schema, $id, title.
        Simplifies Optional fields (anyOf with null).
        Enforces additionalProperties: false for objects.

        Args:
            schema: The JSON schema to sanitize.

        Returns:
            The sanitized schema.
        """
        if not isinstance(schema, dict):
            return schema

        new_schema = {k: v for k, v in schema.items() if k not in _METADATA_KEYS}

        any_of = new_schema.get("anyOf")
        if isinstance(any_of, list):
            non_null = [x for x in any_of if not (isinstance(x, dict) and x.get("type") == "null")]
            if len(non_null) == 1 and isinstance(non_null[0], dict):
                merged = {k: v for k, v in new_schema.items() if k != "anyOf"}
                merged.update({k: v for k, v in non_null[0].items() if k not in merged})
                return SchemaValidator.sanitize_schema(merged)

        if new_schema.get("type") == "object" and "additionalProperties" not in new_schema:
            new_schema["additionalProperties"] = False

        for key, value in new_schema.items():
            if isinstance(value, dict):
                new_schema[key] = SchemaValidator.sanitize_schema(value)
            elif isinstance(value, list):
                new_schema[key] = [SchemaValidator.sanitize_schema(item) for item in value]

        return new_schema
