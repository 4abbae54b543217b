"""Response DTOs for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Response DTO for every error."""

    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(..., alias="statusCode", description="HTTP status code, same as the status line")
    message: str = Field(..., description="Human-readable error message")


class MessageResponse(BaseModel):
    """Response DTO for successful PUT, PATCH and DELETE."""

    message: str = Field(..., description="Human-readable status message")


class CreatedResponse(BaseModel):
    """Response DTO for a successful POST."""

    id: str = Field(..., description="Identifier of the new item")


class MethodIntro(BaseModel):
    """One HTTP method of a route."""

    method: str = Field(..., description="HTTP method")
    description: str = Field(..., description="What the method does")


class RouteIntro(BaseModel):
    """Self description of one mounted route."""

    path: str = Field(..., description="Path template")
    methods: list[MethodIntro] = Field(default_factory=list, description="Methods served at the path")
