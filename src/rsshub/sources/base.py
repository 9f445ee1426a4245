#!/usr/bin/env python3
"""
Feed source definition.
"""

from dataclasses import dataclass
from typing import Dict, Any

import requests


@dataclass(frozen=True)
class FeedSource:
    """An upstream RSS feed. Identity is the name."""
    name: str
    url: str
    category: str

    def __post_init__(self):
        """Validate source definition."""
        if not self.name:
            raise ValueError("FeedSource name must not be empty")
        if not self.url.startswith(('http://', 'https://')):
            raise ValueError(f"FeedSource url must be http(s): {self.url}")

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'url': self.url, 'category': self.category}

    def health_check(self, timeout: float = 10, user_agent: str = '') -> Dict[str, Any]:
        """
        Check feed availability with a HEAD request.

        Args:
            timeout: Request timeout in seconds
            user_agent: Optional User-Agent header value

        Returns:
            Health status dictionary
        """
        headers = {'User-Agent': user_agent} if user_agent else {}
        try:
            response = requests.head(self.url, timeout=timeout, headers=headers, allow_redirects=True)
            return {
                'available': response.status_code < 400,
                'status_code': response.status_code,
                'response_time_ms': response.elapsed.total_seconds() * 1000
            }
        except requests.RequestException as e:
            return {
                'available': False,
                'error': str(e)
            }
