""" Stand-in payloads for tiles and fonts that don't exist.

Map renderers cope badly with HTTP errors for sparse areas, so a missing
tile is answered with EMPTY_TILE: a gzipped vector tile with no features.
Missing glyph ranges get EMPTY_FONT, a glyph protobuf for the font stack
"Metropolis Regular" covering range 1536-1791 with no glyphs in it.

Both are literals so clients see the same bytes on every run.
"""

EMPTY_TILE = (b'\x1f\x8b\x08\x00\xfa\x78\x18\x5e\x00\x03\x93\xe2\xe3\x62'
              b'\x8f\x8f\x4f\xcd\x2d\x28\xa9\xd4\x68\x50\xa8\x60\x02\x00'
              b'\x64\x71\x44\x36\x10\x00\x00\x00')

EMPTY_FONT = b'\n\x1f\n\x12Metropolis Regular\x12\t1536-1791'
