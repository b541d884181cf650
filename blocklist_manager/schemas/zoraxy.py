from pydantic import BaseModel, ConfigDict, Field


class AccessRule(BaseModel):
    """Access rule as Zoraxy returns it from /plugin/api/access/list."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., alias="ID")
    name: str = Field(..., alias="Name")
    desc: str = Field("", alias="Desc")
    blacklist_enabled: bool = Field(False, alias="BlacklistEnabled")
    whitelist_enabled: bool = Field(False, alias="WhitelistEnabled")
