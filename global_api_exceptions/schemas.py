from pydantic import BaseModel, Field, ConfigDict
from typing import Optional

ERROR_CODE_KEY = "ErrorCode"
ERROR_REFERENCE_KEY = "ErrorReference"


# ============================================================================
# Error Response Schemas
# ============================================================================

class HttpError(BaseModel):
    """Body returned to API clients for a translated exception"""
    message: str = Field(alias="Message")
    error_code: Optional[str] = Field(default=None, alias=ERROR_CODE_KEY)
    error_reference: Optional[str] = Field(default=None, alias=ERROR_REFERENCE_KEY)
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_content(self) -> dict:
        """Wire representation; optional keys are omitted when unset"""
        return self.model_dump(by_alias=True, exclude_none=True)
