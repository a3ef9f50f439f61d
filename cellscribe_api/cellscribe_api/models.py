from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from cellscribe.core.models import RenderedOutput, TemplateDefinition


class RenderRequest(BaseModel):
    template: TemplateDefinition = Field(..., description="Template definition to render")
    tables: dict[str, list[dict[str, Any]]] = Field(
        default_factory=dict, description="Host tables: name -> rows"
    )
    names: dict[str, Any] = Field(
        default_factory=dict, description="Host named values: name -> raw value"
    )


class RenderResponse(BaseModel):
    outputs: list[RenderedOutput] = Field(..., description="Rendered outputs in declared order")


class ExpressionRequest(BaseModel):
    template: str = Field(..., description="Template string to check")
