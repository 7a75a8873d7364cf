import os

# Override these if you're not sweeping mainnet through blockstream.info.
ESPLORA_API_URL = os.environ.get("ESPLORA_API_URL", "https://blockstream.info/api")
BITCOIN_RPC_URL = os.environ.get("BITCOIN_RPC_URL", "http://localhost:8332")

DEFAULT_FEE_RATE_SAT_PER_VBYTE: int = 2

# Roughly two weeks of blocks; covers every to_self_delay lnd would have accepted
# by default.
DEFAULT_CSV_LIMIT: int = 2016

# Outputs below this are non-standard for a P2WPKH script.
P2WPKH_DUST_LIMIT_SATS: int = 294

# BIP43 purpose used by lnd for all channel keys.
LND_KEY_PURPOSE: int = 1017

NETWORK_COIN_TYPES = {
    "mainnet": 0,
    "testnet": 1,
    "signet": 1,
    "regtest": 1,
}
