"""Subresource Integrity hashes and security response headers for web pages."""

from browser_security.bootstrap import BrowserSecurity, bootstrap

__all__ = ["BrowserSecurity", "bootstrap"]
