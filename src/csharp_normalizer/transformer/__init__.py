"""
Pattern/construction interpreter.

Ops check a node against a pattern while binding variables, and construct a
node from those bindings. Mappings pair two ops; the :class:`Mappings` stage
applies them to every node of a tree.
"""
