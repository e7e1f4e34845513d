"""
Services package for IPTV Proxy

This package contains the synchronization pipeline: fetch, cache, generate,
publish and schedule.
"""
