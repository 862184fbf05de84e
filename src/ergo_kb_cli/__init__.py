"""
ergo-kb command line interface.

License: MIT
"""
