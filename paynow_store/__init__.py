"""PayNow Store - demo storefront for the PayNow payment gateway"""

__version__ = "1.0.0"
