"""
Lotus JSON-RPC connection layer
"""

from filecoin_chain.rpc.lotus import LotusClient, create_lotus_client

__all__ = ["LotusClient", "create_lotus_client"]
