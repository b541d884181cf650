from typing import List

from pydantic import BaseModel, Field


class ImportRequest(BaseModel):
    access_rule_id: str = Field(..., min_length=1, description="Zoraxy access rule ID")
    blocklist: str = Field(..., description="Comma separated IPs, e.g. '203.0.113.10, 198.51.100.7'")


def parse_blocklist(raw: str) -> List[str]:
    """
    Split a comma separated blocklist into IP strings.

    Tokens are trimmed and empty ones dropped. Order and duplicates are kept,
    nothing is validated as an IP address.
    """
    return [s.strip() for s in raw.split(",") if s.strip()]
