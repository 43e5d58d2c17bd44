"""
HTTP API for the FFmpeg media gateway.

This module provides a FastAPI-based REST API that wraps the ffmpeg and
ffprobe command line tools, exposing compression, conversion, audio
extraction, splitting and inspection of uploaded media files.
"""

__version__ = "1.0.0"
