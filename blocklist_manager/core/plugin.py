"""
Zoraxy plugin handshake.

Zoraxy starts a plugin binary twice:
- with ``-introspect``: the plugin prints its metadata as JSON and exits
- with ``-configure=<json>``: the plugin reads its runtime configuration
  (listen port, Zoraxy API port, API key) and starts serving
"""
from __future__ import annotations
import json
import sys
from enum import IntEnum
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from blocklist_manager.core.exceptions import ConfigurationError

INTROSPECT_FLAG = "-introspect"
CONFIGURE_FLAG = "-configure="


class PluginType(IntEnum):
    ROUTER = 0
    UTILITIES = 1


class PermittedApiEndpoint(BaseModel):
    method: str
    endpoint: str
    reason: str = ""


class IntroSpect(BaseModel):
    id: str
    name: str
    author: str
    author_contact: str = ""
    description: str = ""
    url: str = ""
    type: PluginType = PluginType.UTILITIES
    version_major: int = 1
    version_minor: int = 0
    version_patch: int = 0

    ui_path: str = "/"
    permitted_api_endpoints: List[PermittedApiEndpoint] = Field(default_factory=list)


class RuntimeConstantValue(BaseModel):
    zoraxy_version: str = ""
    zoraxy_uuid: str = ""
    development_build: bool = False


class ConfigureSpec(BaseModel):
    port: int
    runtime_const: RuntimeConstantValue = Field(default_factory=RuntimeConstantValue)
    api_key: Optional[str] = None
    zoraxy_port: Optional[int] = None


def introspect() -> IntroSpect:
    return IntroSpect(
        id="com.anthonyrubick.zoraxy-blocklist-manager",
        name="Blocklist Import Plugin",
        author="Anthony Rubick",
        description="A plugin for importing blocklists into Zoraxy's Access Rules.",
        url="https://github.com/AnthonyMichaelTDM/zoraxy-blocklist-import-plugin",
        type=PluginType.UTILITIES,
        version_major=1,
        version_minor=0,
        version_patch=0,
        ui_path="/",
        permitted_api_endpoints=[
            PermittedApiEndpoint(
                method="POST",
                endpoint="/plugin/api/blacklist/ip/add",
                reason="Used to add IP addresses to the blocklist",
            ),
            PermittedApiEndpoint(
                method="GET",
                endpoint="/plugin/api/access/list",
                reason="Used to list available access rulesets",
            ),
        ],
    )


def parse_configure_spec(raw: str) -> ConfigureSpec:
    try:
        return ConfigureSpec.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"invalid configure spec: {e}") from e


def serve_and_recv_spec(argv: Sequence[str], spec: IntroSpect) -> Optional[ConfigureSpec]:
    """
    Answer the Zoraxy handshake.

    Prints the introspection JSON and exits when asked to introspect. Returns the
    parsed runtime configuration when started with ``-configure``. Returns None when
    started without either flag, so the plugin can run standalone off env settings.
    """
    args = list(argv[1:])
    if INTROSPECT_FLAG in args:
        print(json.dumps(spec.model_dump(mode="json"), indent=2))
        sys.exit(0)

    for arg in args:
        if arg.startswith(CONFIGURE_FLAG):
            return parse_configure_spec(arg[len(CONFIGURE_FLAG):])

    if args:
        raise ConfigurationError(f"unrecognised arguments: {' '.join(args)}")
    return None
