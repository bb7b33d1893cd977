"""
                Café Pickup Ordering Bot

A WhatsApp conversation engine that takes pickup orders for a small café:
pickup time, order contents, payment method and confirmation, followed by
a notification to the shop owner.

Author: Café Pickup Bot Team
Version: 3.0.0
License: MIT
"""

__version__ = "3.0.0"
__author__ = "Café Pickup Bot Team"
