"""Anti-forgery nonce schemas."""

from pydantic import BaseModel, Field


class NonceResponse(BaseModel):
    """A freshly issued nonce for embedding in a form."""

    action: str = Field(..., description="Action the nonce is valid for")
    token: str = Field(..., description="Nonce value")
    field_name: str = Field(..., description="Form field the nonce must be posted in")
    expires_in: int = Field(..., description="Seconds until the nonce expires")
