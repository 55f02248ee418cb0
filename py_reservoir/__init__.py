"""
Python simulation of ground water seeping around clay veins.
"""

__version__ = "0.1.0"
