"""
Rich query module for the consent ledger
Selector query forwarding and result array encoding
"""

from .encoder import encode_query_results
from .gateway import QueryGateway, get_query_gateway, run_query

__all__ = [
    "encode_query_results",
    "QueryGateway",
    "get_query_gateway",
    "run_query",
]
