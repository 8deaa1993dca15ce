#!/usr/bin/env python3
"""
Shared helpers: URL handling and logging setup
"""

import os
import re
import logging
import logging.handlers
import urllib.parse
from typing import Dict, Any, Optional


def extract_domain(url: str) -> str:
    """Extract the lowercase host (without port) from a URL"""
    parsed = urllib.parse.urlparse(url)
    return (parsed.hostname or '').lower()


def normalize_url(url: str, base_url: str = None) -> str:
    """Normalize and resolve relative URLs"""
    if base_url and not url.startswith(('http://', 'https://')):
        return urllib.parse.urljoin(base_url, url)
    return url


def domain_matches(host: str, cookie_domain: str) -> bool:
    """
    Check whether a cookie domain applies to a host (RFC 6265 domain-match)

    Args:
        host: Request host, e.g. "old.backpack.tf"
        cookie_domain: Cookie domain, with or without a leading dot

    Returns:
        True if a cookie set for cookie_domain is sent to host
    """
    host = host.lower()
    domain = cookie_domain.lower().lstrip('.')
    if not domain:
        return False
    return host == domain or host.endswith('.' + domain)


def sanitize_session_id(url: str) -> str:
    """Create safe session ID from URL"""
    domain = extract_domain(url)
    return re.sub(r'[^\w\-_.]', '_', domain)


def setup_logging(logging_config: Dict[str, Any], logs_dir: Optional[str] = None) -> logging.Logger:
    """Setup console and (optionally) rotating file logging."""
    level = getattr(logging, logging_config.get('level', 'INFO').upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(level)

    # Clear existing handlers
    logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if logging_config.get('log_to_file', False):
        logs_dir = logs_dir or logging_config.get('logs_dir', 'logs')
        os.makedirs(logs_dir, exist_ok=True)
        log_filename = os.path.join(logs_dir, logging_config.get('log_filename', 'bptf.log'))

        if logging_config.get('rotate_logs', True):
            file_handler = logging.handlers.RotatingFileHandler(
                log_filename,
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5,
                encoding='utf-8'
            )
        else:
            file_handler = logging.FileHandler(log_filename, encoding='utf-8')

        file_handler.setLevel(logging.DEBUG)  # File gets all logs
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
