"""
Module 09C - Mountain Range CLI

Command-line interface over a Merkle Mountain Range stored as a JSON snapshot.

Usage:
    python -m mmr_cli init
    python -m mmr_cli append 0x<32-byte hex>
    python -m mmr_cli proof 17 --out proof.json
    python -m mmr_cli verify proof.json 0x<32-byte hex>
"""

__version__ = "0.1.0"
