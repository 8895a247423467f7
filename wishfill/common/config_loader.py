"""
Configuration Loader

Loads YAML configuration files for fetch settings (timeouts, user agent,
image limits, rendering proxy) and the known-host labels used for
URL-derived titles.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List

import yaml

from ..errors import ConfigError
from . import constants


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Shipped inside the package
    package_config = Path(__file__).parent.parent / 'config'
    if package_config.exists():
        return package_config

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {package_config}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'fetch_settings.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If the file does not hold a mapping
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{filename}: expected a mapping at top level")
    return data


@dataclass
class RenderingProxySettings:
    """Remote JavaScript rendering service."""
    endpoint: str = constants.RENDERING_PROXY_ENDPOINT
    api_key: str = ""
    country_code: str = "fr"
    timeout: float = constants.RENDERING_PROXY_TIMEOUT
    auto: bool = False
    hosts: List[str] = field(default_factory=list)


@dataclass
class LinkPreviewSettings:
    """Generic link-preview fallback."""
    enabled: bool = True
    user_agent: str = constants.PREVIEW_USER_AGENT
    timeout: float = constants.PAGE_TIMEOUT


@dataclass
class FetchSettings:
    """All knobs of the extraction pipeline, injected into each service."""
    user_agent: str = constants.DEFAULT_USER_AGENT
    accept_language: str = constants.DEFAULT_ACCEPT_LANGUAGE
    page_timeout: float = constants.PAGE_TIMEOUT
    image_timeout: float = constants.IMAGE_TIMEOUT
    max_page_bytes: int = constants.MAX_PAGE_BYTES
    max_image_bytes: int = constants.MAX_IMAGE_BYTES
    image_max_side: int = constants.MAX_IMAGE_SIDE
    jpeg_quality: int = constants.JPEG_QUALITY
    price_min: Decimal = constants.PRICE_MIN
    price_max: Decimal = constants.PRICE_MAX
    quick_add_deadline: float = constants.QUICK_ADD_DEADLINE
    rendering_proxy: RenderingProxySettings = field(default_factory=RenderingProxySettings)
    link_preview: LinkPreviewSettings = field(default_factory=LinkPreviewSettings)

    @property
    def browser_headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": self.accept_language,
        }


def build_fetch_settings(config: Dict[str, Any]) -> FetchSettings:
    """
    Build FetchSettings from a parsed fetch_settings.yaml mapping.

    Missing keys keep their defaults. The rendering proxy API key from the
    environment wins over the file.

    Args:
        config: Parsed YAML mapping

    Returns:
        FetchSettings
    """
    image = config.get('image') or {}
    price = config.get('price') or {}
    quick_add = config.get('quick_add') or {}
    proxy = config.get('rendering_proxy') or {}
    preview = config.get('link_preview') or {}

    defaults = FetchSettings()
    proxy_defaults = RenderingProxySettings()
    preview_defaults = LinkPreviewSettings()

    try:
        settings = FetchSettings(
            user_agent=config.get('user_agent', defaults.user_agent),
            accept_language=config.get('accept_language', defaults.accept_language),
            page_timeout=float(config.get('page_timeout', defaults.page_timeout)),
            image_timeout=float(config.get('image_timeout', defaults.image_timeout)),
            max_page_bytes=int(config.get('max_page_bytes', defaults.max_page_bytes)),
            max_image_bytes=int(config.get('max_image_bytes', defaults.max_image_bytes)),
            image_max_side=int(image.get('max_side', defaults.image_max_side)),
            jpeg_quality=int(image.get('jpeg_quality', defaults.jpeg_quality)),
            price_min=Decimal(str(price.get('min', defaults.price_min))),
            price_max=Decimal(str(price.get('max', defaults.price_max))),
            quick_add_deadline=float(quick_add.get('deadline', defaults.quick_add_deadline)),
            rendering_proxy=RenderingProxySettings(
                endpoint=proxy.get('endpoint', proxy_defaults.endpoint),
                api_key=proxy.get('api_key') or '',
                country_code=proxy.get('country_code', proxy_defaults.country_code),
                timeout=float(proxy.get('timeout', proxy_defaults.timeout)),
                auto=bool(proxy.get('auto', proxy_defaults.auto)),
                hosts=[h.lower() for h in proxy.get('hosts') or []],
            ),
            link_preview=LinkPreviewSettings(
                enabled=bool(preview.get('enabled', preview_defaults.enabled)),
                user_agent=preview.get('user_agent', preview_defaults.user_agent),
                timeout=float(preview.get('timeout', preview_defaults.timeout)),
            ),
        )
    except (TypeError, ValueError, ArithmeticError) as e:
        raise ConfigError(f"fetch_settings.yaml: {e}") from e

    env_key = os.environ.get(constants.RENDERING_PROXY_API_KEY_ENV)
    if env_key:
        settings.rendering_proxy.api_key = env_key

    return settings


def load_fetch_settings() -> FetchSettings:
    """
    Load fetch settings configuration.

    Returns:
        FetchSettings with timeouts, user agent, image and price limits,
        rendering proxy and link preview settings.
    """
    return build_fetch_settings(load_config('fetch_settings.yaml'))


def load_known_hosts() -> Dict[str, str]:
    """
    Load canned product labels for well-known retailers.

    Returns:
        Dictionary mapping lowercase host to label

    Example:
        {
            'amazon.fr': 'Produit Amazon',
            'fnac.com': 'Produit Fnac',
            ...
        }
    """
    config = load_config('known_hosts.yaml')
    hosts = config.get('known_hosts', {}) or {}
    return {host.lower(): label for host, label in hosts.items()}
