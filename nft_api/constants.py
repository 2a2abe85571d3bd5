"""
Well-known program identifiers and metadata account layout constants.

These must match the deployed mainnet values exactly: a wrong program id
derives valid-looking but wrong addresses with no error signal.
"""

# Metaplex token metadata program
METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
# SPL token program
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

METADATA_SEED = b"metadata"
EDITION_SEED = b"edition"
PDA_MARKER = b"ProgramDerivedAddress"

# Runtime limits for program addresses (the bump counts as a seed)
MAX_SEEDS = 16
MAX_SEED_LEN = 32

# Padded widths the metadata program allocates for the string fields
MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200

# First creator address, i.e. the candy machine for candy machine mints.
# 1 + 32 + 32 + (4 + 32) + (4 + 10) + (4 + 200) + 2 + 1 + 4
CANDY_MACHINE_OFFSET = 326
PUBKEY_LENGTH = 32
