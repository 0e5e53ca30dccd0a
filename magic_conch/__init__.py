"""
Magic Conch GroupMe Bot

A small webhook service that answers "/magicconch" questions in a GroupMe
chat with one of the Magic Conch's canned replies.
"""

__version__ = "1.0.0"
__author__ = "Magic Conch Team"
