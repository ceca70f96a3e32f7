"""
Message Signers
"""

from filecoin_chain.signers.base import MessageSigner
from filecoin_chain.signers.secp256k1_signer import Secp256k1Signer, decode_private_key

__all__ = ["MessageSigner", "Secp256k1Signer", "decode_private_key"]
