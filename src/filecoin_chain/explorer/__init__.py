"""
Block explorer services
"""

from filecoin_chain.explorer.filscan import FilscanClient

__all__ = ["FilscanClient"]
