"""Protocol buffer field type codes, wire types and compact field descriptor packing."""

__version__ = "0.4.6"
__all__ = ["types", "fieldinfo"]