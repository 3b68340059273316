from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from . import __version__
from .config.loader import load_behavior_config
from .config.models import BehaviorConfig
from .llm.azure_openai import AzureOpenAIClient, GenerationClient
from .llm.factory import ProviderConfig, resolve_provider
from .mcp.server import StdioServer
from .tools.base import ToolContext
from .tools.builtin import register_builtin_tools
from .tools.dispatcher import ToolDispatcher
from .tools.registry import ToolRegistry

@dataclass
class AppContext:
    cwd: Path
    behavior: BehaviorConfig
    provider: ProviderConfig | None
    llm: GenerationClient
    tools: ToolRegistry
    dispatcher: ToolDispatcher
    config_path: Optional[Path] = None

    def server(self) -> StdioServer:
        return StdioServer(registry=self.tools, dispatcher=self.dispatcher, version=__version__)

    @staticmethod
    def build(
        cwd: Path,
        behavior: BehaviorConfig,
        llm: GenerationClient,
        provider: ProviderConfig | None = None,
        config_path: Optional[Path] = None,
    ) -> "AppContext":
        tools = ToolRegistry()
        register_builtin_tools(tools)
        dispatcher = ToolDispatcher(registry=tools, ctx=ToolContext(config=behavior, llm=llm))
        return AppContext(
            cwd=cwd,
            behavior=behavior,
            provider=provider,
            llm=llm,
            tools=tools,
            dispatcher=dispatcher,
            config_path=config_path,
        )

    @staticmethod
    def from_env(
        cwd: Path,
        provider: str | None = None,
        behavior_config: Path | None = None,
        config_path: Optional[Path] = None,
        blocks_root: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> "AppContext":
        """Read configuration once and wire the dispatcher.

        Credentials come from the provider YAML when config_path exists,
        otherwise from the process environment.
        """
        if config_path:
            config_path = config_path.expanduser().resolve()

        provider_cfg = resolve_provider(provider, yaml_path=config_path, environ=environ)
        behavior = load_behavior_config(cwd=cwd, explicit_path=behavior_config)
        if blocks_root is not None:
            behavior.blocks_root = (cwd / blocks_root.expanduser()).resolve()

        return AppContext.build(
            cwd=cwd,
            behavior=behavior,
            llm=AzureOpenAIClient(config=provider_cfg),
            provider=provider_cfg,
            config_path=config_path,
        )
