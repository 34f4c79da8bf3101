"""
mushafbot - a WhatsApp Quran and quiz bot.
"""

__version__ = "1.0.0"
__logo__ = "📖"
