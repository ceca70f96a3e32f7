import asyncio
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from filecoin_chain import FilecoinChain
from filecoin_chain.logging_config import setup_logging

setup_logging(logging.DEBUG if os.getenv("DEBUG") else logging.INFO)

load_dotenv(Path(__file__).parent.parent.parent.parent / ".env")

FILECOIN_PRIVATE_KEY = os.getenv("FILECOIN_PRIVATE_KEY", "")
FILECOIN_RECIPIENT = os.getenv("FILECOIN_RECIPIENT", "")
# Hardcoded network configuration
FILECOIN_NETWORK = "filecoin:calibration"
AMOUNT = "0.001"

if not FILECOIN_PRIVATE_KEY:
    print("\n❌ Error: FILECOIN_PRIVATE_KEY not set in .env file")
    print("\nPlease add your Filecoin private key to .env file\n")
    exit(1)


async def main():
    chain = FilecoinChain(FILECOIN_NETWORK)

    wallet = await chain.create_wallet_by_private_key(FILECOIN_PRIVATE_KEY)
    if wallet is None:
        print("\n❌ Error: FILECOIN_PRIVATE_KEY is not a usable secp256k1 key")
        return

    print("Initializing Filecoin wallet...")
    print(f"  Network: {FILECOIN_NETWORK}")
    print(f"  Address: {wallet.address}")
    print(f"  Balance: {await chain.get_balance(wallet.address)} attoFIL")

    print("\nRecent transfers:")
    for record in await chain.get_transactions(wallet.address):
        when = record.date.strftime("%Y-%m-%d %H:%M")
        print(f"  {when} {record.status:<7} {record.amount} FIL {record.link}")

    if not FILECOIN_RECIPIENT:
        print("\nSet FILECOIN_RECIPIENT to send a test transfer")
        return

    try:
        estimate = await chain.get_estimate_fee(FILECOIN_RECIPIENT, wallet.address, AMOUNT)
        print(f"\nEstimated fee: {estimate.fee} FIL")
        print(f"  Gas: {estimate.estimate_gas.model_dump(by_alias=True)}")

        message_id = await chain.send(
            FILECOIN_RECIPIENT,
            wallet.address,
            AMOUNT,
            estimate.estimate_gas,
            private_key=FILECOIN_PRIVATE_KEY,
        )
        print(f"\n✅ Pushed message: {message_id}")

        result = await chain.wait_for_confirmation(message_id)
        print(f"\n📋 Status: {result.status.value}")
        if result.receipt:
            print(f"  Gas used: {result.receipt.gas_used}")
    except Exception as e:
        print(f"\n❌ Error: {e}")
        import traceback

        traceback.print_exc()


if __name__ == "__main__":
    asyncio.run(main())
