"""MCP server configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from algtools_mcp.utils import LoggingConfig, get_logger

logger = get_logger(__name__)

DEFAULT_COMPONENTS_URL = "https://ui.algtools.dev/mcp/components.json"
DEFAULT_SEARCH_API_BASE = "https://api.cloudflare.com/client/v4"
DEFAULT_SEARCH_ACCOUNT_ID = "31eafafb86927bf33ef3cf164fe6aa15"
DEFAULT_CURSOR_RULES_RAG = "algtools-cursor-rules-rag"
DEFAULT_UI_RAG = "algtools-ui-stories-rag"


@dataclass
class ServerConfig:
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8787
    base_url: str = "http://localhost:8787"


@dataclass
class ComponentsConfig:
    """Component metadata source."""

    url: str = DEFAULT_COMPONENTS_URL
    timeout: float = 10.0


@dataclass
class SearchConfig:
    """AI search (hosted RAG) configuration."""

    api_base: str = DEFAULT_SEARCH_API_BASE
    account_id: str = DEFAULT_SEARCH_ACCOUNT_ID
    api_token: str | None = None
    cursor_rules_rag: str = DEFAULT_CURSOR_RULES_RAG
    ui_rag: str = DEFAULT_UI_RAG
    timeout: float = 30.0

    def endpoint(self, rag_name: str) -> str:
        """Return the ai-search URL for one RAG index."""
        return (
            f"{self.api_base.rstrip('/')}/accounts/{self.account_id}"
            f"/autorag/rags/{rag_name}/ai-search"
        )


def _env_flag_set(name: str) -> bool:
    return bool(os.getenv(name))


@dataclass
class MCPConfig:
    """Main MCP configuration."""

    server: ServerConfig = field(default_factory=ServerConfig)
    components: ComponentsConfig = field(default_factory=ComponentsConfig)
    search: SearchConfig = field(default_factory=SearchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: str | Path) -> MCPConfig:
        """Load configuration from YAML file.

        Missing sections and keys fall back to defaults. An unreadable or
        invalid file yields the default configuration.

        Args:
            config_path: Path to config.mcp.yml

        Returns:
            MCPConfig instance
        """
        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}

            server_data = data.get("server") or {}
            server = ServerConfig(
                host=server_data.get("host", ServerConfig.host),
                port=int(server_data.get("port", ServerConfig.port)),
                base_url=server_data.get("base_url", ServerConfig.base_url),
            )

            components_data = data.get("components") or {}
            components = ComponentsConfig(
                url=components_data.get("url", DEFAULT_COMPONENTS_URL),
                timeout=float(
                    components_data.get("timeout", ComponentsConfig.timeout)
                ),
            )

            search_data = data.get("search") or {}
            search = SearchConfig(
                api_base=search_data.get("api_base", DEFAULT_SEARCH_API_BASE),
                account_id=search_data.get("account_id", DEFAULT_SEARCH_ACCOUNT_ID),
                api_token=search_data.get("api_token"),
                cursor_rules_rag=search_data.get(
                    "cursor_rules_rag", DEFAULT_CURSOR_RULES_RAG
                ),
                ui_rag=search_data.get("ui_rag", DEFAULT_UI_RAG),
                timeout=float(search_data.get("timeout", SearchConfig.timeout)),
            )

            logging_config = LoggingConfig.from_dict(data.get("logging"))

            logger.info(f"Loaded configuration from {config_path}")
            return cls(
                server=server,
                components=components,
                search=search,
                logging=logging_config,
            )

        except (OSError, yaml.YAMLError, AttributeError, TypeError, ValueError) as e:
            logger.error(f"Failed to load config from {config_path}: {e}")
            logger.info("Using default configuration")
            return cls()

    @classmethod
    def from_env(cls) -> MCPConfig:
        """Load configuration from environment variables.

        Returns:
            MCPConfig instance
        """
        server = ServerConfig(
            host=os.getenv("MCP_HOST", ServerConfig.host),
            port=int(os.getenv("MCP_PORT", str(ServerConfig.port))),
            base_url=os.getenv("MCP_BASE_URL", ServerConfig.base_url),
        )

        components = ComponentsConfig(
            url=os.getenv("COMPONENTS_METADATA_URL", DEFAULT_COMPONENTS_URL),
            timeout=float(
                os.getenv("COMPONENTS_TIMEOUT", str(ComponentsConfig.timeout))
            ),
        )

        search = SearchConfig(
            api_base=os.getenv("AI_SEARCH_API_BASE", DEFAULT_SEARCH_API_BASE),
            account_id=os.getenv("AI_SEARCH_ACCOUNT_ID", DEFAULT_SEARCH_ACCOUNT_ID),
            api_token=os.getenv("AI_SEARCH_API_TOKEN"),
            cursor_rules_rag=os.getenv(
                "AI_SEARCH_CURSOR_RULES_RAG", DEFAULT_CURSOR_RULES_RAG
            ),
            ui_rag=os.getenv("AI_SEARCH_UI_RAG", DEFAULT_UI_RAG),
            timeout=float(os.getenv("AI_SEARCH_TIMEOUT", str(SearchConfig.timeout))),
        )

        logging_config = LoggingConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

        return cls(
            server=server, components=components, search=search, logging=logging_config
        )

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> MCPConfig:
        """Load configuration with priority: env vars > config file > defaults.

        Args:
            config_path: Optional path to config file. Defaults to ./config.mcp.yml

        Returns:
            MCPConfig instance
        """
        if config_path is None:
            config_path = Path.cwd() / "config.mcp.yml"

        config = cls.from_file(config_path)
        env_config = cls.from_env()

        # Merge: env vars take precedence
        if _env_flag_set("MCP_HOST"):
            config.server.host = env_config.server.host
        if _env_flag_set("MCP_PORT"):
            config.server.port = env_config.server.port
        if _env_flag_set("MCP_BASE_URL"):
            config.server.base_url = env_config.server.base_url

        if _env_flag_set("COMPONENTS_METADATA_URL"):
            config.components.url = env_config.components.url
        if _env_flag_set("COMPONENTS_TIMEOUT"):
            config.components.timeout = env_config.components.timeout

        if _env_flag_set("AI_SEARCH_API_BASE"):
            config.search.api_base = env_config.search.api_base
        if _env_flag_set("AI_SEARCH_ACCOUNT_ID"):
            config.search.account_id = env_config.search.account_id
        if _env_flag_set("AI_SEARCH_API_TOKEN"):
            config.search.api_token = env_config.search.api_token
        if _env_flag_set("AI_SEARCH_CURSOR_RULES_RAG"):
            config.search.cursor_rules_rag = env_config.search.cursor_rules_rag
        if _env_flag_set("AI_SEARCH_UI_RAG"):
            config.search.ui_rag = env_config.search.ui_rag
        if _env_flag_set("AI_SEARCH_TIMEOUT"):
            config.search.timeout = env_config.search.timeout

        if _env_flag_set("LOG_LEVEL"):
            config.logging.level = env_config.logging.level

        return config

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary (the API token is never included)."""
        return {
            "server": {
                "host": self.server.host,
                "port": self.server.port,
                "base_url": self.server.base_url,
            },
            "components": {
                "url": self.components.url,
                "timeout": self.components.timeout,
            },
            "search": {
                "api_base": self.search.api_base,
                "account_id": self.search.account_id,
                "cursor_rules_rag": self.search.cursor_rules_rag,
                "ui_rag": self.search.ui_rag,
                "timeout": self.search.timeout,
                "api_token_configured": bool(self.search.api_token),
            },
            "logging": self.logging.to_dict(),
        }


_mcp_config: MCPConfig | None = None


def get_mcp_config() -> MCPConfig:
    """Get or load the process-wide MCP configuration."""
    global _mcp_config
    if _mcp_config is None:
        _mcp_config = MCPConfig.load()
    return _mcp_config


def set_mcp_config(config: MCPConfig | None) -> None:
    """Replace the process-wide MCP configuration (None forces a reload)."""
    global _mcp_config
    _mcp_config = config
