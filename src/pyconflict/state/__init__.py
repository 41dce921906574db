"""State layer.

This package owns the filter snapshot, the address bar it is mirrored
into, and the message bus that tells views when the snapshot changed.
"""
