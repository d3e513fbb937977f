# Footer
NRG_V2_FOOTER_ID = b"NER5"
NRG_V1_FOOTER_ID = b"NERO"
NRG_V2_FOOTER_SIZE = 12  # ID + 64-bit offset of the first chunk
NRG_V1_FOOTER_SIZE = 8   # ID + 32-bit offset of the first chunk

# Chunk chain
CHUNK_ID_SIZE = 4
CHUNK_LENGTH_SIZE = 8
CHUNK_LENGTH_SIZES = (4, 8)
CHUNK_END_ID = b"END!"

# Chunk IDs
CHUNK_CUEX = b"CUEX"
CHUNK_DAOX = b"DAOX"
CHUNK_SINF = b"SINF"
CHUNK_MTYP = b"MTYP"
CHUNK_AFNM = b"AFNM"
CHUNK_CDTX = b"CDTX"
CHUNK_ETN2 = b"ETN2"
CHUNK_ETNF = b"ETNF"
CHUNK_DINF = b"DINF"
CHUNK_TOCT = b"TOCT"
CHUNK_RELO = b"RELO"

# DAOX layout
DAOX_HEADER_SIZE = 22  # size2, UPC, padding, TOC type, first and last track
DAOX_TRACK_SIZE = 42
DAOX_ISRC_SIZE = 12
DAOX_TRACK_UNKNOWN_DEFAULT = 0x0001

# CUEX layout
CUEX_ENTRY_SIZE = 8
CUEX_LEAD_IN = 0x00
CUEX_LEAD_OUT = 0xAA

SINF_SIZE = 4
MTYP_SIZE = 4

# Sector layout
AUDIO_SECTOR_SIZE = 2352
SUBCHANNEL_SIZE = 96
AUDIO_SUBCHANNEL_SECTOR_SIZE = AUDIO_SECTOR_SIZE + SUBCHANNEL_SIZE
SUPPORTED_SECTOR_SIZES = (AUDIO_SECTOR_SIZE, AUDIO_SUBCHANNEL_SECTOR_SIZE)

# Output
CUE_EXTENSION = ".cue"
RAW_EXTENSION = ".raw"
NRG_EXTENSION = ".nrg"
