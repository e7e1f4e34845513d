"""IPTV Proxy: republishes a streaming channel catalog as M3U8 and XMLTV."""

__version__ = "0.1.0"
