"""newswall: news-driven desktop wallpaper generation.

Pipeline: headlines -> keywords -> prompt -> image provider (with stock-image
fallback) -> saved file -> desktop background.
"""

__version__ = "0.3.0"
