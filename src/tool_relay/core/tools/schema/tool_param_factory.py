import inspect
from typing import Any, get_origin, Annotated, get_args

from pydantic import Field, BaseModel, ConfigDict
from pydantic.fields import FieldInfo

from ...exceptions import ToolValidationError
from ...logger import get_logger

logger = get_logger(__name__)


class FieldTuple(BaseModel):
    """Ensures, that the dynamic model field definition is correctly typed for Pydantic's create_model."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    annotation: Any
    field: FieldInfo


class ToolParameterFactory:
    """Turns one executor parameter into a pydantic field definition."""

    @classmethod
    def build_field_tuple(cls, param_name: str, param: inspect.Parameter, tool_name: str) -> FieldTuple:
        """Creates the tuple of (annotation, FieldInfo) for a single executor parameter.

        The wire name of the parameter comes from the ``alias`` of its ``Field`` (e.g. ``filePattern``
        for ``file_pattern``); parameters without an alias use their Python name.

        Args:
            param_name: The name of the parameter.
            param: The inspect.Parameter object.
            tool_name: The name of the tool for error reporting.

        Returns:
            A FieldTuple containing the bare type annotation and the Pydantic Field configuration.
        """
        field_info = cls._extract_field_info(param.annotation, param_name, tool_name)
        base_type = get_args(param.annotation)[0]
        default = param.default if param.default is not inspect.Parameter.empty else ...

        return FieldTuple(
            annotation=base_type,
            field=Field(default=default, description=field_info.description, alias=field_info.alias),
        )

    @staticmethod
    def _extract_field_info(annotation: Any, param_name: str, tool_name: str) -> FieldInfo:
        """Every executor parameter needs 'Annotated[<class>, Field(description='...')]' as its annotation.

        Args:
            annotation: The type annotation to inspect.
            param_name: The name of the parameter being checked.
            tool_name: The name of the tool for error reporting.

        Returns:
            The FieldInfo carrying the description (and optional alias).

        Raises:
            ToolValidationError: If the parameter is missing a Pydantic Field description.
        """
        if get_origin(annotation) is Annotated:
            for metadata in get_args(annotation)[1:]:
                if isinstance(metadata, FieldInfo) and metadata.description:
                    return metadata

        msg = (
            f"Parameter '{param_name}' in tool '{tool_name}' is missing a description.\n"
            f"Usage: {param_name}: Annotated[Type, Field(description='...')] = ..."
        )
        logger.error(msg)
        raise ToolValidationError(msg)
