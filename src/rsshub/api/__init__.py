#!/usr/bin/env python3
"""
HTTP surface of the RSS hub.
"""

from .app import create_app

__all__ = ['create_app']
