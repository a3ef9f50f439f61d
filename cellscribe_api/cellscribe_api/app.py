from __future__ import annotations

from functools import lru_cache

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request, status

from cellscribe.core.models import RenderedOutput, TemplateCheck, ValidationResult
from cellscribe.rendering import OutputRenderError, TemplateRenderer

from .models import ExpressionRequest, RenderRequest, RenderResponse
from .service import TemplateStructureError, preview_output, render_outputs, validate_request
from .settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


def verify_shared_secret(
    request: Request, settings: Settings = Depends(get_settings)
) -> None:
    secret = settings.shared_secret
    if secret is None:
        return
    provided = request.headers.get("x-cellscribe-secret")
    if provided != secret.get_secret_value():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")


app = FastAPI(title="Cellscribe API", version="0.1.0")


@app.post(
    "/render",
    response_model=RenderResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
def render(
    payload: RenderRequest,
    _: None = Depends(verify_shared_secret),
) -> RenderResponse:
    try:
        outputs = render_outputs(payload)
    except TemplateStructureError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.result.model_dump(by_alias=True),
        ) from exc
    except OutputRenderError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    return RenderResponse(outputs=outputs)


@app.post(
    "/preview/{output_key}",
    response_model=RenderedOutput,
    response_model_by_alias=True,
    status_code=status.HTTP_200_OK,
)
def preview(
    output_key: str,
    payload: RenderRequest,
    _: None = Depends(verify_shared_secret),
) -> RenderedOutput:
    try:
        output = preview_output(payload, output_key)
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Error rendering output "{output_key}": {exc}',
        ) from exc

    if output is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Unknown output {output_key!r}"
        )
    return output


@app.post("/validate", response_model=ValidationResult, status_code=status.HTTP_200_OK)
def validate(
    payload: RenderRequest,
    _: None = Depends(verify_shared_secret),
) -> ValidationResult:
    return validate_request(payload)


@app.post("/validate/expression", response_model=TemplateCheck, status_code=status.HTTP_200_OK)
def validate_expression(
    payload: ExpressionRequest,
    _: None = Depends(verify_shared_secret),
) -> TemplateCheck:
    return TemplateRenderer().validate_template(payload.template)


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "cellscribe_api.app:app",
        host=settings.bind_host,
        port=settings.bind_port,
        reload=False,
        workers=1,
    )


__all__ = ["app", "main"]
