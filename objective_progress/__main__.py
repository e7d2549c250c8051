"""
Allow running the progress service as a Python module.

Usage:
    python -m objective_progress

This is equivalent to running:
    python run_server.py
"""

from run_server import main

if __name__ == "__main__":
    main()
