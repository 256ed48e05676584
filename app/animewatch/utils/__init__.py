from .helpers import clean_str, error_message, now_iso

__all__ = ["clean_str", "error_message", "now_iso"]
