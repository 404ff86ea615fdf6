#!/usr/bin/env python3
"""
Main entry point for the chatlib IRC bot
"""

from chatlib.main import run

if __name__ == "__main__":
    run()
