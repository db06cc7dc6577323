from pydantic import BaseModel, Field


class TenantSettingsDTO(BaseModel):
    asaas_pix_key: str | None = Field(default=None, max_length=140)
    asaas_access_token: str | None = Field(default=None, min_length=1)
