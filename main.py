#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--width W] [--height H] [--mines N]
    python main.py demo [--games N] [--delay SECONDS]
"""
from src.minesweeper.cli import main


if __name__ == "__main__":
    main()
