# Common utilities
from .cancellation import CancellationToken
from .config_loader import (
    FetchSettings,
    LinkPreviewSettings,
    RenderingProxySettings,
    build_fetch_settings,
    load_config,
    load_fetch_settings,
    load_known_hosts,
)
from .log_config import setup_logging
from .text_utils import clean_text, clean_title, extract_url_from_text
from .url_title import title_from_url
from .validation import is_valid_url, validate_url
