"""Basic usage example: local accounts and impersonation on top of an HTTP node."""

import asyncio
import logging
import os

from dotenv import load_dotenv
from web3 import AsyncHTTPProvider

from provider_accounts import (
    AccountsConfig,
    BroadcastStrategy,
    ImpersonationConfig,
    ImpersonationMode,
    ProviderConfig,
    ProviderTransport,
    RPCImpersonator,
    extend_provider_with_accounts,
)

load_dotenv()
logging.basicConfig(level=logging.INFO)


async def main():
    rpc_url = os.getenv("RPC_URL", "http://127.0.0.1:8545")
    transport = ProviderTransport(AsyncHTTPProvider(rpc_url))

    # PROVIDER_PRIVATE_KEYS="0x..,0x.." or PROVIDER_MNEMONIC="..."
    accounts = AccountsConfig.from_env()
    if not accounts.private_keys and not accounts.mnemonic:
        raise ValueError("Set PROVIDER_PRIVATE_KEYS or PROVIDER_MNEMONIC")

    provider = extend_provider_with_accounts(
        transport,
        ProviderConfig(
            accounts=accounts,
            impersonation=ImpersonationConfig(
                impersonator=RPCImpersonator(transport),
                mode=ImpersonationMode.UNKNOWN,
            ),
            broadcast=BroadcastStrategy.CLIENT,
        ),
    )

    addresses = await provider.request("eth_accounts")
    print(f"Local accounts: {addresses}")

    sender = addresses[0]
    signature = await provider.request("personal_sign", ["0x68656c6c6f", sender])
    print(f"personal_sign('hello') by {sender}: {signature}")

    tx_hash = await provider.request(
        "eth_sendTransaction",
        [{"from": sender, "to": addresses[-1], "value": hex(10**15)}],
    )
    print(f"Sent locally signed transaction: {tx_hash}")

    # Any address not in the registry is impersonated on dev nodes
    whale = os.getenv("IMPERSONATE_ADDRESS")
    if whale:
        tx_hash = await provider.request(
            "eth_sendTransaction",
            [{"from": whale, "to": sender, "value": hex(10**15)}],
        )
        print(f"Sent impersonated transaction from {whale}: {tx_hash}")

    block_number = await provider.request("eth_blockNumber")
    print(f"Pass-through eth_blockNumber: {block_number}")


if __name__ == "__main__":
    asyncio.run(main())
