"""
MsgBoard - Minimal authenticated message board

Password-protected accounts, cookie sessions and a rate-limited,
ownership-checked message store on top of SQLite.
"""

__version__ = "0.1.0"
__author__ = "MsgBoard Project"
