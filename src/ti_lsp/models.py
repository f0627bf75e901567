"""Schema of the oracle's builtin class configuration files."""

from typing import Any, List
from pydantic import BaseModel, ConfigDict, Field, model_serializer


class BuiltinArgument(BaseModel):
    """One positional argument; `type` lists the accepted class names."""

    type: List[str] = Field(default_factory=list)


class BuiltinReturnType(BaseModel):
    type: List[str] = Field(default_factory=list)
    is_conditional: bool = False
    is_destructive: bool = False

    @model_serializer(mode="wrap")
    def _omit_false_flags(self, handler) -> dict[str, Any]:
        data = handler(self)
        for key in ("is_conditional", "is_destructive"):
            if not data.get(key):
                data.pop(key, None)
        return data


class BuiltinMethod(BaseModel):
    name: str
    arguments: List[BuiltinArgument] = Field(default_factory=list)
    block_parameters: List[str] = Field(default_factory=list)
    return_type: BuiltinReturnType = Field(default_factory=BuiltinReturnType)

    @model_serializer(mode="wrap")
    def _omit_empty_block_parameters(self, handler) -> dict[str, Any]:
        data = handler(self)
        if not data.get("block_parameters"):
            data.pop("block_parameters", None)
        return data


class BuiltinClassConfig(BaseModel):
    """One `<class>.json` file in the builtin config directory."""

    model_config = ConfigDict(populate_by_name=True)

    frame: str = "Builtin"
    klass: str = Field(alias="class")
    extends: List[str] = Field(default_factory=list)
    instance_methods: List[BuiltinMethod] = Field(default_factory=list)
    class_methods: List[BuiltinMethod] = Field(default_factory=list)
