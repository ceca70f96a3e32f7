"""
Message signer base interface
"""

from abc import ABC, abstractmethod

from filecoin_chain.message import Message
from filecoin_chain.types import SignedMessage


class MessageSigner(ABC):
    """
    Abstract base class for message signers.

    Responsible for holding key material and producing signed messages.
    """

    @abstractmethod
    def get_address(self) -> str:
        """Get the signer's account address"""
        pass

    @abstractmethod
    def export_private_key(self) -> str:
        """Export the private key as hex"""
        pass

    @abstractmethod
    async def sign_message(self, message: Message) -> SignedMessage:
        """
        Sign an unsigned message.

        Args:
            message: Message whose From is this signer's address

        Returns:
            SignedMessage ready for MpoolPush
        """
        pass
