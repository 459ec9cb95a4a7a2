"""Storage adapter boundary helpers."""

from .response_normalizer import normalize_list_response, unwrap_record

__all__ = ["normalize_list_response", "unwrap_record"]
